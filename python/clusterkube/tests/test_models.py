import pytest
from pydantic import ValidationError

from clusterkube.errors import ConfigError, ParseError
from clusterkube.models.cluster import Cluster, ClusterDirectory
from clusterkube.models.kubeconfig import parse_kubeconfig, render_kubeconfig
from clusterkube.models.settings import ClusterKubeSettings, InstallOptions
from clusterkube.secrets.directory import load_cluster_directory, save_cluster_directory

from conftest import DEMO_KUBECONFIG

DIRECTORY_YAML = """\
ssh_keys:
  - name: admin
    private_key_path: ~/.ssh/id_ed25519
clusters:
  - name: demo
    nodes:
      - name: demo-master-01
        node_type: master
        ip_address: 203.0.113.9
        private_ip_address: 10.0.0.5
        ssh_key_name: admin
"""


# ---------------------------------------------------------------------------
# Cluster directory
# ---------------------------------------------------------------------------


def test_find_cluster_by_name(directory):
    idx, cluster = directory.find_cluster_by_name("workers-only")
    assert idx == 1
    assert cluster.name == "workers-only"

    assert directory.find_cluster_by_name("missing") == (-1, None)


def test_directory_from_yaml():
    directory = ClusterDirectory.from_yaml(DIRECTORY_YAML)

    master = directory.clusters[0].master_node()
    assert master.public_address == "203.0.113.9"
    assert master.private_address == "10.0.0.5"
    assert master.credential_key_name == "admin"
    assert directory.find_ssh_key("admin").private_key_path == "~/.ssh/id_ed25519"


def test_empty_yaml_is_an_empty_directory():
    assert ClusterDirectory.from_yaml("") == ClusterDirectory()


def test_duplicate_cluster_names_are_rejected():
    with pytest.raises(ValidationError, match="Duplicate cluster name"):
        ClusterDirectory(clusters=[Cluster(name="a"), Cluster(name="a")])


def test_nodes_are_immutable(demo_node):
    with pytest.raises(ValidationError):
        demo_node.ip_address = "198.51.100.1"


@pytest.mark.asyncio
async def test_save_then_load_directory(directory, tmp_path):
    path = str(tmp_path / "nested" / "config.yaml")

    await save_cluster_directory(directory, path)

    assert await load_cluster_directory(path) == directory


@pytest.mark.asyncio
async def test_missing_directory_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        await load_cluster_directory(str(tmp_path / "nope.yaml"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    ["clusters: [unterminated\n", "clusters:\n  - nodes: []\n", "- just\n- a list\n"],
)
async def test_invalid_directory_file(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError, match="invalid cluster directory"):
        await load_cluster_directory(str(path))


# ---------------------------------------------------------------------------
# Kubeconfig codec
# ---------------------------------------------------------------------------


def test_parse_kubeconfig():
    doc = parse_kubeconfig(DEMO_KUBECONFIG)

    assert doc.kind == "Config"
    assert doc.current_context == "kubernetes-admin@kubernetes"
    assert doc.server_urls() == ["https://10.0.0.5:6443"]
    assert doc.users[0].user["client-key-data"] == "LS0tLS1LRVk="


def test_render_keeps_document_keys():
    rendered = render_kubeconfig(parse_kubeconfig(DEMO_KUBECONFIG))

    assert rendered.startswith("apiVersion: v1\nkind: Config\n")
    assert "current-context: kubernetes-admin@kubernetes" in rendered
    assert "certificate-authority-data: LS0tLS1CRUdJTg==" in rendered
    assert parse_kubeconfig(rendered) == parse_kubeconfig(DEMO_KUBECONFIG)


def test_unknown_top_level_keys_survive_rendering():
    doc = parse_kubeconfig("apiVersion: v1\nkind: Config\nextensions:\n- name: x\n")

    assert "extensions:" in render_kubeconfig(doc)


@pytest.mark.parametrize(
    "content",
    ["clusters: [unterminated\n", "- a\n- b\n", "plain text", "clusters:\n- cluster: {}\n"],
)
def test_parse_errors(content):
    with pytest.raises(ParseError):
        parse_kubeconfig(content)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_settings_defaults(monkeypatch):
    for var in ("CLUSTERKUBE_KUBE_DIR", "CLUSTERKUBE_SSH_USER", "CLUSTERKUBE_REMOTE_KUBECONFIG_PATH"):
        monkeypatch.delenv(var, raising=False)

    settings = ClusterKubeSettings()

    assert settings.kubeconfig_path().name == "config"
    assert settings.kubeconfig_path().parent.name == ".kube"
    assert settings.ssh_user == "root"
    assert settings.remote_kubeconfig_path == "/etc/kubernetes/admin.conf"


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CLUSTERKUBE_KUBE_DIR", str(tmp_path))
    monkeypatch.setenv("CLUSTERKUBE_SSH_PORT", "2222")

    settings = ClusterKubeSettings()

    assert settings.kubeconfig_path() == tmp_path / "config"
    assert settings.ssh_port == 2222


def test_install_options_default_to_interactive_install():
    options = InstallOptions()

    assert (options.print_only, options.force, options.backup) == (False, False, False)
