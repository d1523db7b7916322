import pytest

from clusterkube.errors import AuthError, RemoteError
from clusterkube.kubeconfig.fetcher import fetch_kubeconfig


@pytest.mark.asyncio
async def test_authenticates_before_reading_admin_conf(demo_node, spy_executor):
    content = await fetch_kubeconfig(spy_executor, demo_node)

    assert content == "server: https://10.0.0.5:6443\n"
    assert spy_executor.calls == [
        ("authenticate", "admin"),
        ("run", ("demo-master-01", ["cat", "/etc/kubernetes/admin.conf"])),
    ]


@pytest.mark.asyncio
async def test_custom_remote_path(demo_node, spy_executor):
    await fetch_kubeconfig(spy_executor, demo_node, "/etc/rancher/rke2/rke2.yaml")

    assert spy_executor.calls[-1] == (
        "run",
        ("demo-master-01", ["cat", "/etc/rancher/rke2/rke2.yaml"]),
    )


@pytest.mark.asyncio
async def test_auth_failure_stops_before_run(demo_node, failing_auth_executor):
    with pytest.raises(AuthError, match="wrong passphrase"):
        await fetch_kubeconfig(failing_auth_executor, demo_node)

    assert failing_auth_executor.calls == [("authenticate", "admin")]


@pytest.mark.asyncio
@pytest.mark.parametrize("output", ["", "  \n\n"])
async def test_empty_output_is_a_remote_error(demo_node, make_executor, output):
    with pytest.raises(RemoteError, match="is empty"):
        await fetch_kubeconfig(make_executor(output=output), demo_node)


@pytest.mark.asyncio
async def test_remote_error_propagates_without_retry(demo_node, make_executor):
    executor = make_executor(run_error=RemoteError("connection refused", 255))

    with pytest.raises(RemoteError, match="connection refused"):
        await fetch_kubeconfig(executor, demo_node)

    assert [name for name, _ in executor.calls] == ["authenticate", "run"]
