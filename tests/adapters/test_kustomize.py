"""Tests for the kustomize argument builders."""

from pathlib import Path

import pytest
import yaml

from kubemcp.adapters.kustomize import (
    DEFAULT_KUSTOMIZE_DIR,
    KUSTOMIZATION_FILENAME,
    KustomizeAdapter,
    image_arg,
    render_kustomization,
)
from kubemcp.adapters.models import FileWrite, Invocation


@pytest.fixture
def kustomize(tmp_path: Path) -> KustomizeAdapter:
    return KustomizeAdapter(staging_dir=tmp_path)


def _plan(adapter: KustomizeAdapter, name: str, arguments: dict[str, object]) -> Invocation:
    plan = adapter.build(name, arguments)
    assert isinstance(plan, Invocation)
    return plan


class TestRenderKustomization:
    def test_minimal(self) -> None:
        doc = yaml.safe_load(render_kustomization([]))
        assert doc == {
            "apiVersion": "kustomize.config.k8s.io/v1beta1",
            "kind": "Kustomization",
            "resources": [],
        }

    def test_optional_fields(self) -> None:
        doc = yaml.safe_load(
            render_kustomization(
                ["deploy.yaml"], namespace="prod", name_prefix="a-", name_suffix="-b"
            )
        )
        assert doc["namespace"] == "prod"
        assert doc["namePrefix"] == "a-"
        assert doc["nameSuffix"] == "-b"
        assert doc["resources"] == ["deploy.yaml"]

    def test_key_order(self) -> None:
        text = render_kustomization(["a.yaml"], namespace="prod")
        assert text.index("apiVersion") < text.index("kind") < text.index("namespace")
        assert text.index("namespace") < text.index("resources")


class TestImageArg:
    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({"new_name": "registry/nginx", "new_tag": "1.25"}, "nginx=registry/nginx:1.25"),
            ({"new_tag": "1.25"}, "nginx:1.25"),
            ({"digest": "sha256:abc"}, "nginx@sha256:abc"),
            ({}, "nginx"),
        ],
    )
    def test_forms(self, kwargs: dict[str, str], expected: str) -> None:
        assert image_arg("nginx", **kwargs) == expected


class TestBuildAndApply:
    def test_definitions(self, kustomize: KustomizeAdapter) -> None:
        defs = kustomize.tool_definitions()
        assert len(defs) == 8
        assert {d.namespace for d in defs} == {"kustomize"}

    def test_build(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_build",
            {
                "path": "overlays/prod",
                "enableHelm": True,
                "loadRestrictor": "LoadRestrictionsNone",
                "output": "out.yaml",
            },
        )
        assert plan.argv == [
            "kustomize", "build", "overlays/prod", "--enable-helm",
            "--load-restrictor", "LoadRestrictionsNone", "-o", "out.yaml",
        ]

    def test_apply_runs_kubectl(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_apply",
            {"path": "overlays/prod", "namespace": "prod", "serverSide": True, "prune": True},
        )
        assert plan.argv == [
            "kubectl", "apply", "-k", "overlays/prod", "-n", "prod", "--server-side", "--prune",
        ]

    def test_apply_uses_configured_kubectl(self, tmp_path: Path) -> None:
        adapter = KustomizeAdapter(kubectl_program="/usr/local/bin/kubectl", staging_dir=tmp_path)
        plan = _plan(adapter, "kustomize_apply", {"path": ".", "dryRun": True})
        assert plan.argv == ["/usr/local/bin/kubectl", "apply", "-k", ".", "--dry-run=client"]

    def test_version(self, kustomize: KustomizeAdapter) -> None:
        assert _plan(kustomize, "kustomize_version", {}).argv == ["kustomize", "version"]


class TestCreate:
    def test_returns_file_write(self, kustomize: KustomizeAdapter, tmp_path: Path) -> None:
        target = tmp_path / "app"
        plan = kustomize.build(
            "kustomize_create", {"path": str(target), "resources": ["deploy.yaml"]}
        )
        assert isinstance(plan, FileWrite)
        expected = str(target / KUSTOMIZATION_FILENAME)
        assert plan.file.path == expected
        assert plan.message == f"Created {expected}"
        assert yaml.safe_load(plan.file.content)["resources"] == ["deploy.yaml"]
        assert not target.exists()

    def test_default_directory(self, kustomize: KustomizeAdapter, tmp_path: Path) -> None:
        plan = kustomize.build("kustomize_create", {})
        assert isinstance(plan, FileWrite)
        assert plan.file.path == str(tmp_path / DEFAULT_KUSTOMIZE_DIR / KUSTOMIZATION_FILENAME)


class TestEdit:
    def test_add_resource_runs_in_directory(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize, "kustomize_edit_add", {"path": "base", "type": "resource", "file": "svc.yaml"}
        )
        assert plan.args == ["edit", "add", "resource", "svc.yaml"]
        assert plan.cwd == "base"

    def test_add_label_uses_literal(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_edit_add",
            {"path": "base", "type": "label", "literal": "team:web", "file": "ignored"},
        )
        assert plan.args == ["edit", "add", "label", "team:web"]

    def test_add_configmap(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_edit_add",
            {
                "path": "base",
                "type": "configmap",
                "name": "cfg",
                "file": "app.env",
                "literal": "mode=fast",
            },
        )
        assert plan.args == [
            "edit", "add", "configmap", "cfg", "--from-file=app.env", "--from-literal=mode=fast",
        ]

    def test_set_image(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_edit_set",
            {"path": "base", "type": "image", "value": "nginx", "newTag": "1.25"},
        )
        assert plan.args == ["edit", "set", "image", "nginx:1.25"]

    def test_set_namespace(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_edit_set",
            {"path": "base", "type": "namespace", "value": "prod", "newTag": "ignored"},
        )
        assert plan.args == ["edit", "set", "namespace", "prod"]

    def test_remove(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize,
            "kustomize_edit_remove",
            {"path": "base", "type": "resource", "file": "old.yaml"},
        )
        assert plan.args == ["edit", "remove", "resource", "old.yaml"]
        assert plan.cwd == "base"

    def test_empty_path_inherits_cwd(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(kustomize, "kustomize_edit_remove", {"type": "resource", "file": "a.yaml"})
        assert plan.cwd is None


class TestCfg:
    def test_grep_keeps_pattern(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(
            kustomize, "kustomize_cfg", {"command": "grep", "path": ".", "pattern": "kind=Service"}
        )
        assert plan.args == ["cfg", "grep", ".", "kind=Service"]

    def test_pattern_ignored_for_other_commands(self, kustomize: KustomizeAdapter) -> None:
        plan = _plan(kustomize, "kustomize_cfg", {"command": "tree", "path": ".", "pattern": "x"})
        assert plan.args == ["cfg", "tree", "."]
