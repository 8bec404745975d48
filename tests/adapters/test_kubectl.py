"""Tests for the kubectl argument builders."""

from pathlib import Path

import pytest

from kubemcp.adapters.kubectl import MANIFEST_FILENAME, PORT_FORWARD_NOTE, KubectlAdapter
from kubemcp.adapters.models import Invocation, ToolOutcome


@pytest.fixture
def kubectl(tmp_path: Path) -> KubectlAdapter:
    return KubectlAdapter(staging_dir=tmp_path)


def _args(adapter: KubectlAdapter, name: str, arguments: dict[str, object]) -> list[str]:
    plan = adapter.build(name, arguments)
    assert isinstance(plan, Invocation)
    assert plan.program == "kubectl"
    return plan.args


class TestDefinitions:
    def test_twelve_tools_in_kubectl_namespace(self, kubectl: KubectlAdapter) -> None:
        defs = kubectl.tool_definitions()
        assert len(defs) == 12
        assert all(d.namespace == "kubectl" for d in defs)
        assert all(d.name.startswith("kubectl_") for d in defs)

    def test_every_definition_has_a_builder(self, kubectl: KubectlAdapter) -> None:
        for definition in kubectl.tool_definitions():
            plan = kubectl.build(definition.name, {})
            assert plan != ToolOutcome.error(f"Unknown tool: {definition.name}")

    def test_schema_shape(self, kubectl: KubectlAdapter) -> None:
        get = next(d for d in kubectl.tool_definitions() if d.name == "kubectl_get")
        assert get.input_schema["type"] == "object"
        assert get.input_schema["required"] == ["resource"]
        assert get.input_schema["properties"]["output"]["enum"] == ["wide", "yaml", "json", "name"]

    def test_apply_has_no_required_list(self, kubectl: KubectlAdapter) -> None:
        apply = next(d for d in kubectl.tool_definitions() if d.name == "kubectl_apply")
        assert "required" not in apply.input_schema


class TestGet:
    def test_namespace_then_output(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl, "kubectl_get", {"resource": "pods", "namespace": "default", "output": "json"}
        )
        assert args == ["get", "pods", "-n", "default", "-o", "json"]

    def test_all_namespaces_replaces_namespace(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_get",
            {"resource": "pods", "namespace": "default", "allNamespaces": True},
        )
        assert args == ["get", "pods", "--all-namespaces"]

    def test_name_and_selector(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl, "kubectl_get", {"resource": "deploy", "name": "web", "selector": "app=web"}
        )
        assert args == ["get", "deploy", "web", "-l", "app=web"]

    def test_empty_namespace_is_absent(self, kubectl: KubectlAdapter) -> None:
        with_empty = _args(kubectl, "kubectl_get", {"resource": "pods", "namespace": ""})
        without = _args(kubectl, "kubectl_get", {"resource": "pods"})
        assert with_empty == without == ["get", "pods"]

    def test_namespace_appears_once(self, kubectl: KubectlAdapter) -> None:
        args = _args(kubectl, "kubectl_describe", {"resource": "pod", "name": "a", "namespace": "x"})
        assert args.count("-n") == 1

    def test_wrong_types_fall_back_to_defaults(self, kubectl: KubectlAdapter) -> None:
        args = _args(kubectl, "kubectl_get", {"resource": "pods", "allNamespaces": "yes"})
        assert args == ["get", "pods"]


class TestLogs:
    def test_full_argument_order(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_logs",
            {
                "pod": "web-0",
                "namespace": "prod",
                "container": "app",
                "since": "5m",
                "tail": 100,
                "previous": True,
                "follow": True,
            },
        )
        assert args == [
            "logs", "web-0", "-n", "prod", "-c", "app", "--since", "5m", "--tail", "100", "--previous",
        ]

    def test_fractional_tail_truncated(self, kubectl: KubectlAdapter) -> None:
        assert _args(kubectl, "kubectl_logs", {"pod": "p", "tail": 10.7})[-2:] == ["--tail", "10"]

    def test_zero_tail_is_kept(self, kubectl: KubectlAdapter) -> None:
        assert _args(kubectl, "kubectl_logs", {"pod": "p", "tail": 0}) == ["logs", "p", "--tail", "0"]


class TestApply:
    def test_filename(self, kubectl: KubectlAdapter) -> None:
        plan = kubectl.build("kubectl_apply", {"filename": "deploy.yaml", "dryRun": True})
        assert isinstance(plan, Invocation)
        assert plan.args == ["apply", "--dry-run=client", "-f", "deploy.yaml"]
        assert plan.staged_file is None

    def test_manifest_is_staged(self, kubectl: KubectlAdapter, tmp_path: Path) -> None:
        plan = kubectl.build(
            "kubectl_apply", {"manifest": "kind: Namespace\n", "namespace": "dev"}
        )
        assert isinstance(plan, Invocation)
        expected_path = str(tmp_path / MANIFEST_FILENAME)
        assert plan.args == ["apply", "-n", "dev", "-f", expected_path]
        assert plan.staged_file is not None
        assert plan.staged_file.path == expected_path
        assert plan.staged_file.content == "kind: Namespace\n"

    def test_builder_does_not_write(self, kubectl: KubectlAdapter, tmp_path: Path) -> None:
        kubectl.build("kubectl_apply", {"manifest": "x: 1"})
        assert not (tmp_path / MANIFEST_FILENAME).exists()


class TestMutatingCommands:
    def test_delete(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_delete",
            {
                "resource": "pod",
                "name": "web-0",
                "namespace": "prod",
                "selector": "app=web",
                "force": True,
                "gracePeriod": 0,
            },
        )
        assert args == [
            "delete", "pod", "web-0", "-n", "prod", "-l", "app=web", "--force", "--grace-period", "0",
        ]

    def test_exec_wraps_command_in_shell(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_exec",
            {"pod": "web-0", "command": "ls -la /tmp", "container": "app", "namespace": "prod"},
        )
        assert args == ["exec", "web-0", "-n", "prod", "-c", "app", "--", "sh", "-c", "ls -la /tmp"]

    def test_scale(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl, "kubectl_scale", {"resource": "deployment", "name": "web", "replicas": 3}
        )
        assert args == ["scale", "deployment/web", "--replicas=3"]

    def test_scale_defaults_to_one_replica(self, kubectl: KubectlAdapter) -> None:
        args = _args(kubectl, "kubectl_scale", {"resource": "deployment", "name": "web"})
        assert args == ["scale", "deployment/web", "--replicas=1"]

    def test_rollout_undo_with_revision(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_rollout",
            {"action": "undo", "resource": "deployment", "name": "web", "revision": 2},
        )
        assert args == ["rollout", "undo", "deployment/web", "--to-revision=2"]

    def test_create_from_literal_and_file(self, kubectl: KubectlAdapter) -> None:
        args = _args(
            kubectl,
            "kubectl_create",
            {
                "resource": "configmap",
                "name": "cfg",
                "namespace": "dev",
                "fromLiteral": {"mode": "fast", "debug": True, "workers": 4},
                "fromFile": "app.conf",
            },
        )
        assert args == [
            "create",
            "configmap",
            "cfg",
            "-n",
            "dev",
            "--from-literal=mode=fast",
            "--from-literal=debug=true",
            "--from-literal=workers=4",
            "--from-file=app.conf",
        ]


class TestNonProcessTools:
    def test_port_forward_returns_command_text(self, kubectl: KubectlAdapter) -> None:
        plan = kubectl.build(
            "kubectl_port_forward", {"resource": "svc/web", "ports": "8080:80", "namespace": "prod"}
        )
        assert isinstance(plan, ToolOutcome)
        assert not plan.is_error
        assert plan.text == (
            f"Port forward: kubectl port-forward svc/web 8080:80 -n prod\n{PORT_FORWARD_NOTE}"
        )

    @pytest.mark.parametrize(
        ("arguments", "expected"),
        [
            ({"action": "current"}, ["config", "current-context"]),
            ({"action": "list"}, ["config", "get-contexts"]),
            ({"action": "use", "name": "kind-dev"}, ["config", "use-context", "kind-dev"]),
        ],
    )
    def test_context(
        self, kubectl: KubectlAdapter, arguments: dict[str, object], expected: list[str]
    ) -> None:
        assert _args(kubectl, "kubectl_context", arguments) == expected

    def test_context_unknown_action(self, kubectl: KubectlAdapter) -> None:
        plan = kubectl.build("kubectl_context", {"action": "rename"})
        assert plan == ToolOutcome.error("Unknown action: rename")

    def test_top_namespace_only_for_pods(self, kubectl: KubectlAdapter) -> None:
        nodes = _args(kubectl, "kubectl_top", {"resource": "nodes", "namespace": "x"})
        pods = _args(
            kubectl, "kubectl_top", {"resource": "pods", "namespace": "x", "containers": True}
        )
        assert nodes == ["top", "nodes"]
        assert pods == ["top", "pods", "-n", "x", "--containers"]


class TestProgramOverride:
    def test_custom_program(self, tmp_path: Path) -> None:
        adapter = KubectlAdapter("/opt/bin/kubectl", staging_dir=tmp_path)
        plan = adapter.build("kubectl_get", {"resource": "pods"})
        assert isinstance(plan, Invocation)
        assert plan.argv == ["/opt/bin/kubectl", "get", "pods"]

    def test_unknown_tool(self, kubectl: KubectlAdapter) -> None:
        assert kubectl.build("kubectl_nope", {}) == ToolOutcome.error("Unknown tool: kubectl_nope")
