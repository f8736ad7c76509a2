"""
Guest customization specs for cloned Linux VMs
"""

import ipaddress
from dataclasses import dataclass, field
from typing import List, Optional
from pyVmomi import vim
from ...exceptions import ConfigError


DEFAULT_TIMEZONE = 'Europe/Paris'


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma separated option value, dropping blanks"""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


@dataclass
class CustomizationParams:
    """Network identity applied to the guest during clone"""
    hostname: str
    ip_address: str
    netmask: Optional[str] = None
    gateways: List[str] = field(default_factory=list)
    dns_servers: List[str] = field(default_factory=list)
    domains: List[str] = field(default_factory=list)
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_options(cls, hostname: Optional[str], ip: Optional[str],
                     netmask: Optional[str] = None, gateway: Optional[str] = None,
                     dns: Optional[str] = None, domain: Optional[str] = None,
                     timezone: Optional[str] = None) -> 'CustomizationParams':
        """Build params from raw command line values"""
        if not hostname:
            raise ConfigError("A hostname is required for customization (--hostname)")
        if not ip:
            raise ConfigError("An IP address is required for customization (--ip)")
        # LinuxPrep will not accept an identity without a domain
        if not split_list(domain):
            raise ConfigError("A domain is required for customization (--domain)")

        try:
            interface = ipaddress.ip_interface(ip.strip())
        except ValueError:
            raise ConfigError(f"Invalid IP address '{ip}'")

        # Bare addresses parse as /32, only trust the prefix when one was given
        if not netmask and '/' in ip:
            netmask = str(interface.netmask)

        return cls(
            hostname=hostname,
            ip_address=str(interface.ip),
            netmask=netmask,
            gateways=split_list(gateway),
            dns_servers=split_list(dns),
            domains=split_list(domain),
            timezone=timezone or DEFAULT_TIMEZONE,
        )

    @property
    def domain(self) -> Optional[str]:
        return self.domains[0] if self.domains else None


class CustomizationBuilder:
    """Turns CustomizationParams into a vSphere customization Specification"""

    def build(self, params: CustomizationParams) -> vim.vm.customization.Specification:
        spec = vim.vm.customization.Specification()
        spec.globalIPSettings = self._global_settings(params)
        spec.identity = self._identity(params)
        spec.nicSettingMap = [self._adapter_mapping(params)]
        return spec

    def _global_settings(self, params: CustomizationParams) -> vim.vm.customization.GlobalIPSettings:
        settings = vim.vm.customization.GlobalIPSettings()
        settings.dnsServerList = params.dns_servers
        settings.dnsSuffixList = params.domains
        return settings

    def _identity(self, params: CustomizationParams) -> vim.vm.customization.LinuxPrep:
        identity = vim.vm.customization.LinuxPrep()
        identity.hostName = vim.vm.customization.FixedName(name=params.hostname)
        identity.domain = params.domain
        identity.hwClockUTC = False
        identity.timeZone = params.timezone
        return identity

    def _adapter_mapping(self, params: CustomizationParams) -> vim.vm.customization.AdapterMapping:
        ip_settings = vim.vm.customization.IPSettings()
        ip_settings.ip = vim.vm.customization.FixedIp(ipAddress=params.ip_address)
        if params.netmask:
            ip_settings.subnetMask = params.netmask
        ip_settings.gateway = params.gateways
        ip_settings.dnsServerList = params.dns_servers
        ip_settings.dnsDomain = params.domain

        mapping = vim.vm.customization.AdapterMapping()
        mapping.adapter = ip_settings
        return mapping
