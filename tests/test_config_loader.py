import yaml

from neighbor_discovery.config.config_loader import ConfigLoader, DEFAULT_CONFIG_FILE, DiscoveryConfig


def write_config(tmp_path, text):
    (tmp_path / DEFAULT_CONFIG_FILE).write_text(text, encoding="utf-8")


def test_missing_file_gives_defaults(tmp_path):
    config = ConfigLoader(str(tmp_path)).load()
    assert config == DiscoveryConfig()
    assert config.sweep.probe_timeout == 1.0
    assert config.sweep.concurrency_limit == 50
    assert config.neighbor.command_timeout == 10


def test_loads_values(tmp_path):
    write_config(tmp_path, """
sweep:
  method: scapy
  concurrency_limit: 8
  probe_timeout: 0.5
  settle_delay: 0
  drain_timeout: 4
  interface: eth1
neighbor:
  command_timeout: 3
resolution:
  resolve_hostnames: false
  oui_file: vendors.tsv
""")
    config = ConfigLoader(str(tmp_path)).load()

    assert config.sweep.method == "scapy"
    assert config.sweep.concurrency_limit == 8
    assert config.sweep.probe_timeout == 0.5
    assert config.sweep.settle_delay == 0.0
    assert config.sweep.drain_timeout == 4.0
    assert config.sweep.interface == "eth1"
    assert config.neighbor.command_timeout == 3
    assert config.resolution.resolve_hostnames is False
    assert config.resolution.oui_file == str(tmp_path / "vendors.tsv")


def test_invalid_values_fall_back_per_field(tmp_path):
    write_config(tmp_path, """
sweep:
  method: nmap
  concurrency_limit: -1
  probe_timeout: fast
  settle_delay: -2
neighbor: not-a-mapping
resolution:
  resolve_hostnames: maybe
""")
    config = ConfigLoader(str(tmp_path)).load()

    assert config.sweep.method == "ping"
    assert config.sweep.concurrency_limit == 50
    assert config.sweep.probe_timeout == 1.0
    assert config.sweep.settle_delay == 0.5
    assert config.neighbor.command_timeout == 10
    assert config.resolution.resolve_hostnames is True


def test_broken_yaml_gives_defaults(tmp_path):
    write_config(tmp_path, "sweep: [unclosed\n")
    assert ConfigLoader(str(tmp_path)).load() == DiscoveryConfig()


def test_non_mapping_document_gives_defaults(tmp_path):
    write_config(tmp_path, "- just\n- a list\n")
    assert ConfigLoader(str(tmp_path)).load() == DiscoveryConfig()


def test_create_default_config(tmp_path):
    loader = ConfigLoader(str(tmp_path / "conf"))
    path = loader.create_default_config()

    assert path is not None and path.exists()
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["sweep"]["method"] == "ping"
    assert loader.load() == DiscoveryConfig()
    # Existing files are left alone
    assert loader.create_default_config() is None


def test_packaged_config_matches_defaults():
    assert ConfigLoader().load() == DiscoveryConfig()
