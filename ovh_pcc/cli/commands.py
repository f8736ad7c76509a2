"""
Command handlers; each takes a connected PccClient and the parsed args
"""

import argparse
from ..bootstrap.chef import BootstrapOptions, parse_run_list
from ..client import PccClient
from ..infrastructure.vsphere.customization import CustomizationParams
from ..workflows.clone import CloneRequest


def template_list(client: PccClient, args: argparse.Namespace) -> int:
    for vm in client.list_templates():
        print(f"Template Name: {vm.name}")
    return 0


def vm_list(client: PccClient, args: argparse.Namespace) -> int:
    for vm in client.list_vms(args.folder):
        print(f"VM Name: {vm.name}")
    return 0


def vm_delete(client: PccClient, args: argparse.Namespace) -> int:
    client.delete_vm(args.vm_name)
    print(f"Deleted virtual machine {args.vm_name}")
    return 0


def build_bootstrap_options(client: PccClient, args: argparse.Namespace) -> BootstrapOptions:
    config = client.config
    return BootstrapOptions(
        run_list=parse_run_list(args.run_list),
        ssh_user=args.ssh_user,
        ssh_password=args.ssh_password,
        identity_file=args.identity_file,
        distro=args.distro or config.distro,
        bootstrap_version=args.bootstrap_version or config.bootstrap_version,
        node_name=args.node_name,
        environment=args.environment,
        chef_server_url=config.chef_server_url,
        validation_client_name=config.validation_client_name,
        validation_key=config.validation_key,
    )


def prepare_clone(args: argparse.Namespace) -> None:
    """Check the customization options before any vCenter login"""
    args.customization = CustomizationParams.from_options(
        hostname=args.hostname,
        ip=args.ip,
        netmask=args.netmask,
        gateway=args.gw,
        dns=args.dns,
        domain=args.domain,
        timezone=args.tz,
    )


def vm_clone(client: PccClient, args: argparse.Namespace) -> int:
    bootstrap = None if args.no_bootstrap else build_bootstrap_options(client, args)

    request = CloneRequest(
        vm_name=args.vm_name,
        template_name=args.template,
        customization=args.customization,
        power_on=args.start,
        hostname_timeout=args.hostname_timeout,
        bootstrap=bootstrap,
    )
    client.clone_vm(request)
    return 0
