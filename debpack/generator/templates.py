"""Text templates for the generated debian/ files."""

from __future__ import annotations

from debpack.models.package import ROLE_BIN, ROLE_ETC, ROLE_LIB, ROLE_VAR

COMPAT_LEVEL = "9"
BUILD_DEPENDS = "debhelper (>= 9)"
STANDARDS_VERSION = "3.9.8"
SECTION = "perl"
PRIORITY = "optional"
RUNTIME_DEPENDENCY = "perl"
DISTRIBUTION = "unstable"
URGENCY = "low"
DEBIAN_REVISION = "1"

# Install order of roles, and the prefix each is copied to
INSTALL_PREFIXES: list[tuple[str, str]] = [
    (ROLE_BIN, "/usr/local/bin"),
    (ROLE_ETC, "/etc"),
    (ROLE_LIB, "/usr/share/perl5"),
    (ROLE_VAR, "/var"),
]

CHANGELOG_TEMPLATE = """\
{package} ({version}-{revision}) {distribution}; urgency={urgency}

  * Automated build from {origin}.

 -- {maintainer}  {date}
"""

RULES_TEMPLATE = """\
#!/usr/bin/make -f

%:
\tdh $@

override_dh_auto_configure:

override_dh_auto_build:

override_dh_auto_test:

override_dh_auto_install:
{install_steps}
"""

INSTALL_STEP_TEMPLATE = """\
\tinstall -d $(CURDIR)/debian/{package}{prefix}
\tcp -a {role}/. $(CURDIR)/debian/{package}{prefix}/
"""
