"""
chef-client install commands per bootstrap distro
"""

from typing import Dict, Optional
from ..exceptions import BootstrapError


DEFAULT_DISTRO = 'ubuntu10.04-apt'

_GEM_INSTALL = "gem install chef --no-rdoc --no-ri{gem_version}"

_INSTALL_TEMPLATES: Dict[str, str] = {
    'ubuntu10.04-apt': (
        'echo "deb http://apt.opscode.com/ lucid-0.10 main" > /etc/apt/sources.list.d/opscode.list && '
        'wget -qO - http://apt.opscode.com/packages@opscode.com.gpg.key | apt-key add - && '
        'apt-get update && '
        'DEBIAN_FRONTEND=noninteractive apt-get install -y chef{apt_version}'
    ),
    'ubuntu10.04-gems': (
        'apt-get update && '
        'DEBIAN_FRONTEND=noninteractive apt-get install -y ruby ruby1.8-dev build-essential '
        'wget libruby1.8 rubygems && ' + _GEM_INSTALL
    ),
    'centos5-gems': (
        'yum install -y ruby ruby-devel gcc gcc-c++ automake autoconf make rubygems && ' + _GEM_INSTALL
    ),
    'fedora13-gems': (
        'yum install -y ruby ruby-devel gcc gcc-c++ automake autoconf rubygems make && ' + _GEM_INSTALL
    ),
    'chef-full': (
        'curl -L https://omnitruck.chef.io/install.sh | bash -s --{omnibus_version}'
    ),
}


def supported_distros():
    return sorted(_INSTALL_TEMPLATES)


def install_command(distro: str, version: Optional[str] = None) -> str:
    """Shell snippet installing chef-client for ``distro``"""
    try:
        template = _INSTALL_TEMPLATES[distro]
    except KeyError:
        raise BootstrapError(
            f"Unknown bootstrap distro '{distro}', expected one of: "
            f"{', '.join(supported_distros())}"
        )

    return template.format(
        apt_version=f"={version}" if version else "",
        gem_version=f" --version {version}" if version else "",
        omnibus_version=f" -v {version}" if version else "",
    )
