#!/usr/bin/env python3
"""
ovh-pcc command line entry point

Usage:
    ovh-pcc template list
    ovh-pcc vm list [--folder NAME]
    ovh-pcc vm delete VMNAME
    ovh-pcc vm clone VMNAME TEMPLATE --ip IP --hostname NAME [options]
"""

import sys
import logging
import argparse
from typing import List, Optional
from . import commands
from ..client import PccClient
from ..config import load_config, to_bool
from ..exceptions import PccError


def _add_connection_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("vCenter connection")
    group.add_argument("--config", help="YAML config file (default: $OVH_PCC_CONFIG or ~/.ovh-pcc.yml)")
    group.add_argument("--vsphere-host", help="vCenter host name")
    group.add_argument("--vsphere-user", help="vCenter user")
    group.add_argument("--vsphere-pass", help="vCenter password")
    group.add_argument("--vsphere-port", type=int, help="vCenter port (default 443)")
    group.add_argument("--vsphere-dc", help="Datacenter to work in")
    group.add_argument("--vsphere-insecure", action="store_const", const=True,
                       help="Skip TLS certificate verification")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")


def _add_clone_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("vm_name", nargs="?", metavar="VMNAME")
    parser.add_argument("template", nargs="?", metavar="TEMPLATE")

    custom = parser.add_argument_group("guest customization")
    custom.add_argument("--ip", help="IP address for customization, CIDR notation accepted")
    custom.add_argument("--netmask", help="Netmask for customization")
    custom.add_argument("--gw", help="Gateway(s) for customization, comma separated")
    custom.add_argument("--dns", help="DNS server(s) for customization, comma separated")
    custom.add_argument("--domain", help="Domain name(s) for customization, comma separated")
    custom.add_argument("--hostname", help="Unqualified hostname for customization")
    custom.add_argument("--tz", help="Timezone in 'Area/Location' format")

    boot = parser.add_argument_group("chef bootstrap")
    boot.add_argument("-r", "--run-list", help="Comma separated list of roles/recipes to apply")
    boot.add_argument("-x", "--ssh-user", default="root", help="The ssh username")
    boot.add_argument("-P", "--ssh-password", help="The ssh password")
    boot.add_argument("-i", "--identity-file", help="The SSH identity file used for authentication")
    boot.add_argument("-d", "--distro", help="Bootstrap a distro using a template")
    boot.add_argument("--bootstrap-version", help="The version of Chef to install")
    boot.add_argument("-N", "--node-name", help="The chef node name for the new node")
    boot.add_argument("-E", "--environment", help="The chef environment for the new node")
    boot.add_argument("--no-bootstrap", action="store_true", help="Skip the chef bootstrap")

    parser.add_argument("--start", type=to_bool, default=True, metavar="STARTVM",
                        help="Whether to start the VM after a successful clone (default true)")
    parser.add_argument("--hostname-timeout", type=float,
                        help="Seconds to wait for the guest hostname (default: no limit)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ovh-pcc",
                                     description="Manage VMs on an OVH Private Cloud vCenter")
    resources = parser.add_subparsers(dest="resource", metavar="{template,vm}")

    template = resources.add_parser("template", help="VM templates")
    template_actions = template.add_subparsers(dest="action", metavar="{list}")
    template_list = template_actions.add_parser("list", help="List templates in the datacenter")
    _add_connection_options(template_list)
    template_list.set_defaults(handler=commands.template_list, command_parser=template_list,
                               required_names=[])

    vm = resources.add_parser("vm", help="Virtual machines")
    vm_actions = vm.add_subparsers(dest="action", metavar="{list,delete,clone}")

    vm_list = vm_actions.add_parser("list", help="List VMs in the datacenter")
    _add_connection_options(vm_list)
    vm_list.add_argument("-f", "--folder", help="The folder to list VMs in")
    vm_list.set_defaults(handler=commands.vm_list, command_parser=vm_list, required_names=[])

    vm_delete = vm_actions.add_parser("delete", help="Delete a VM")
    _add_connection_options(vm_delete)
    vm_delete.add_argument("vm_name", nargs="?", metavar="VMNAME")
    vm_delete.set_defaults(handler=commands.vm_delete, command_parser=vm_delete, required_names=[
        ("vm_name", "You must specify a virtual machine name"),
    ])

    vm_clone = vm_actions.add_parser("clone", help="Clone a template into a new VM")
    _add_connection_options(vm_clone)
    _add_clone_options(vm_clone)
    vm_clone.set_defaults(handler=commands.vm_clone, prepare=commands.prepare_clone,
                          command_parser=vm_clone, required_names=[
        ("vm_name", "You must specify a virtual machine name"),
        ("template", "You must specify a template name"),
    ])

    return parser


def _connection_overrides(args: argparse.Namespace) -> dict:
    return {
        'vsphere_host': args.vsphere_host,
        'vsphere_user': args.vsphere_user,
        'vsphere_pass': args.vsphere_pass,
        'vsphere_port': args.vsphere_port,
        'vsphere_dc': args.vsphere_dc,
        'vsphere_insecure': args.vsphere_insecure,
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "handler", None):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    for attr, message in args.required_names:
        if not getattr(args, attr, None):
            args.command_parser.print_usage(sys.stderr)
            print(f"FATAL: {message}", file=sys.stderr)
            return 1

    try:
        prepare = getattr(args, "prepare", None)
        if prepare:
            prepare(args)
        config = load_config(args.config, _connection_overrides(args))
        with PccClient(config) as client:
            return args.handler(client, args)
    except PccError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
