"""
Unit tests for the ovh-pcc command line
"""

import pytest
from unittest.mock import Mock, patch
from ovh_pcc.cli import commands
from ovh_pcc.cli.main import build_parser, main
from ovh_pcc.client import PccClient
from ovh_pcc.exceptions import ConfigError, VMNotFoundError
from ovh_pcc.workflows.clone import CloneStage
from tests.mocks.vsphere import make_vm


CLONE_ARGV = [
    "vm", "clone", "web06", "00_UBUNTU-10.04",
    "--ip", "46.105.128.246/27", "--gw", "46.105.128.254", "--dns", "213.186.33.99",
    "--domain", "intra.kroknet.com", "--hostname", "web06",
    "-r", "role[web],recipe[nginx]", "-x", "agruet", "-P", "secret",
]


@pytest.fixture
def client(pcc_config):
    client = Mock(spec=PccClient)
    client.config = pcc_config
    return client


@pytest.fixture
def patched_client(client):
    """Patch config loading and the client so main() never reaches a vCenter"""
    with patch('ovh_pcc.cli.main.load_config') as mock_load, \
            patch('ovh_pcc.cli.main.PccClient') as mock_client_class:
        mock_client_class.return_value.__enter__.return_value = client
        mock_client_class.return_value.__exit__.return_value = False
        yield mock_load, mock_client_class


@pytest.mark.unit
class TestParser:
    """Test cases for argument parsing"""

    def test_clone_defaults(self):
        args = build_parser().parse_args(["vm", "clone", "web06", "00_UBUNTU-10.04"])
        assert args.start is True
        assert args.ssh_user == "root"
        assert args.hostname_timeout is None
        assert args.no_bootstrap is False
        assert args.vsphere_insecure is None

    def test_start_false(self):
        args = build_parser().parse_args(["vm", "clone", "web06", "t", "--start", "false"])
        assert args.start is False

    def test_list_folder(self):
        args = build_parser().parse_args(["vm", "list", "--folder", "web"])
        assert args.folder == "web"
        assert args.handler is commands.vm_list


@pytest.mark.unit
class TestMain:
    """Test cases for the entry point"""

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage: ovh-pcc" in capsys.readouterr().out

    def test_delete_requires_name(self, capsys, patched_client):
        mock_load, mock_client_class = patched_client

        assert main(["vm", "delete"]) == 1

        err = capsys.readouterr().err
        assert "usage:" in err
        assert "FATAL: You must specify a virtual machine name" in err
        mock_client_class.assert_not_called()

    def test_clone_requires_template(self, capsys, patched_client):
        assert main(["vm", "clone", "web06"]) == 1
        assert "FATAL: You must specify a template name" in capsys.readouterr().err

    def test_flags_become_overrides(self, client, patched_client):
        mock_load, mock_client_class = patched_client
        client.list_templates.return_value = []

        assert main(["template", "list", "--vsphere-host", "pcc.ovh.com", "--vsphere-port", "8443",
                     "--config", "/etc/ovh-pcc.yml"]) == 0

        path, overrides = mock_load.call_args[0]
        assert path == "/etc/ovh-pcc.yml"
        assert overrides['vsphere_host'] == "pcc.ovh.com"
        assert overrides['vsphere_port'] == 8443
        assert overrides['vsphere_user'] is None
        mock_client_class.assert_called_once_with(mock_load.return_value)

    def test_error_exit(self, capsys, client, patched_client):
        client.delete_vm.side_effect = VMNotFoundError("VM ghost not found")

        assert main(["vm", "delete", "ghost"]) == 1
        assert "ERROR: VM ghost not found" in capsys.readouterr().err

    def test_config_error_exit(self, capsys, patched_client):
        mock_load, _ = patched_client
        mock_load.side_effect = ConfigError("Missing required setting(s): vsphere_host")

        assert main(["template", "list"]) == 1
        assert "ERROR: Missing required setting(s): vsphere_host" in capsys.readouterr().err


@pytest.mark.unit
class TestCommands:
    """Test cases for command handlers"""

    def test_template_list(self, capsys, client, patched_client):
        client.list_templates.return_value = [make_vm("00_UBUNTU-10.04", template=True),
                                              make_vm("00_DEBIAN-6", template=True)]

        assert main(["template", "list"]) == 0
        assert capsys.readouterr().out == (
            "Template Name: 00_UBUNTU-10.04\nTemplate Name: 00_DEBIAN-6\n"
        )

    def test_vm_list(self, capsys, client, patched_client):
        client.list_vms.return_value = [make_vm("web01"), make_vm("web02")]

        assert main(["vm", "list", "-f", "web"]) == 0
        client.list_vms.assert_called_once_with("web")
        assert capsys.readouterr().out == "VM Name: web01\nVM Name: web02\n"

    def test_vm_delete(self, capsys, client, patched_client):
        assert main(["vm", "delete", "web-old"]) == 0
        client.delete_vm.assert_called_once_with("web-old")
        assert "Deleted virtual machine web-old" in capsys.readouterr().out

    def test_vm_clone(self, client, patched_client):
        client.clone_vm.return_value = Mock(stage=CloneStage.DONE)

        assert main(CLONE_ARGV) == 0

        request = client.clone_vm.call_args[0][0]
        assert request.vm_name == "web06"
        assert request.template_name == "00_UBUNTU-10.04"
        assert request.power_on is True
        assert request.customization.ip_address == "46.105.128.246"
        assert request.customization.netmask == "255.255.255.224"
        assert request.bootstrap.run_list == ["role[web]", "recipe[nginx]"]
        assert request.bootstrap.ssh_user == "agruet"
        assert request.bootstrap.sudo is True
        assert request.bootstrap.distro == "ubuntu10.04-apt"

    def test_vm_clone_no_bootstrap(self, client, patched_client):
        assert main(CLONE_ARGV + ["--no-bootstrap", "--start", "no"]) == 0

        request = client.clone_vm.call_args[0][0]
        assert request.bootstrap is None
        assert request.power_on is False

    def test_bootstrap_options_fall_back_to_config(self, client):
        client.config.distro = "chef-full"
        client.config.chef_server_url = "https://chef.kroknet.com"
        client.config.validation_key = "/home/agruet/.chef/validation.pem"
        args = build_parser().parse_args(["vm", "clone", "web06", "t", "--bootstrap-version", "0.10.8"])

        options = commands.build_bootstrap_options(client, args)

        assert options.distro == "chef-full"
        assert options.bootstrap_version == "0.10.8"
        assert options.chef_server_url == "https://chef.kroknet.com"
        assert options.validation_key == "/home/agruet/.chef/validation.pem"

    @pytest.mark.parametrize("option,message", [
        ("--ip", "An IP address is required"),
        ("--hostname", "A hostname is required"),
        ("--domain", "A domain is required"),
    ])
    def test_vm_clone_customization_checked_before_login(self, capsys, client, patched_client,
                                                         option, message):
        mock_load, mock_client_class = patched_client
        argv = list(CLONE_ARGV)
        index = argv.index(option)
        del argv[index:index + 2]

        assert main(argv) == 1
        assert f"ERROR: {message}" in capsys.readouterr().err
        mock_load.assert_not_called()
        mock_client_class.assert_not_called()
