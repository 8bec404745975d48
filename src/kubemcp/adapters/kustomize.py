"""kustomize adapter — manifest overlay tools.

``kustomize_apply`` goes through ``kubectl apply -k``; the ``edit`` tools run
``kustomize`` inside the kustomization directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

import yaml

from kubemcp.adapters.base import Builder, CommandAdapter
from kubemcp.adapters.models import FileWrite, StagedFile, ToolPlan
from kubemcp.adapters.params import Params
from kubemcp.adapters.schema import boolean, string, string_array, tool
from kubemcp.protocols.mcp.models import ToolDefinition

KUSTOMIZATION_FILENAME = "kustomization.yaml"
DEFAULT_KUSTOMIZE_DIR = "kustomize"


def render_kustomization(
    resources: list[str],
    *,
    namespace: str = "",
    name_prefix: str = "",
    name_suffix: str = "",
) -> str:
    """Render a minimal ``kustomization.yaml`` document."""
    doc: dict[str, Any] = {
        "apiVersion": "kustomize.config.k8s.io/v1beta1",
        "kind": "Kustomization",
    }
    if namespace:
        doc["namespace"] = namespace
    if name_prefix:
        doc["namePrefix"] = name_prefix
    if name_suffix:
        doc["nameSuffix"] = name_suffix
    doc["resources"] = list(resources)
    return yaml.safe_dump(doc, sort_keys=False, default_flow_style=False)


def image_arg(image: str, *, new_name: str = "", new_tag: str = "", digest: str = "") -> str:
    """Compose the argument of ``kustomize edit set image``."""
    if new_name and new_tag:
        return f"{image}={new_name}:{new_tag}"
    if new_tag:
        return f"{image}:{new_tag}"
    if digest:
        return f"{image}@{digest}"
    return image


class KustomizeAdapter(CommandAdapter):
    """Builds ``kustomize`` (and ``kubectl apply -k``) invocations."""

    namespace: ClassVar[str] = "kustomize"
    default_program: ClassVar[str] = "kustomize"

    def __init__(
        self,
        program: str | None = None,
        *,
        kubectl_program: str = "kubectl",
        staging_dir: str | Path | None = None,
    ) -> None:
        super().__init__(program, staging_dir=staging_dir)
        self.kubectl_program = kubectl_program

    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        ns = self.namespace
        return (
            tool(
                ns,
                "kustomize_build",
                "Build a kustomization directory into YAML manifests",
                {
                    "path": string("Path to kustomization directory"),
                    "output": string("Output file path (optional, stdout if not set)"),
                    "enableHelm": boolean("Enable Helm chart inflation"),
                    "loadRestrictor": string(
                        "Load restriction policy",
                        enum=["LoadRestrictionsNone", "LoadRestrictionsRootOnly"],
                    ),
                },
                required=["path"],
            ),
            tool(
                ns,
                "kustomize_apply",
                "Build and apply kustomization to cluster (kubectl apply -k)",
                {
                    "path": string("Path to kustomization directory"),
                    "namespace": string("Target namespace"),
                    "dryRun": boolean("Run in dry-run mode"),
                    "serverSide": boolean("Use server-side apply"),
                    "prune": boolean("Prune resources not in manifest"),
                },
                required=["path"],
            ),
            tool(
                ns,
                "kustomize_create",
                "Create a new kustomization.yaml file",
                {
                    "path": string("Directory for new kustomization"),
                    "resources": string_array("Resource files to include"),
                    "namespace": string("Namespace to set"),
                    "namePrefix": string("Prefix for all resource names"),
                    "nameSuffix": string("Suffix for all resource names"),
                },
                required=["path"],
            ),
            tool(
                ns,
                "kustomize_edit_add",
                "Add items to kustomization (resource, patch, configmap, secret, etc.)",
                {
                    "path": string("Path to kustomization directory"),
                    "type": string(
                        "What to add",
                        enum=[
                            "resource",
                            "patch",
                            "configmap",
                            "secret",
                            "base",
                            "label",
                            "annotation",
                        ],
                    ),
                    "name": string("Name (for configmap/secret)"),
                    "file": string("File path to add"),
                    "literal": string("Literal value (key=value)"),
                },
                required=["path", "type"],
            ),
            tool(
                ns,
                "kustomize_edit_set",
                "Set values in kustomization (namespace, nameprefix, namesuffix, image)",
                {
                    "path": string("Path to kustomization directory"),
                    "type": string(
                        "What to set", enum=["namespace", "nameprefix", "namesuffix", "image"]
                    ),
                    "value": string("Value to set"),
                    "newName": string("New image name (for image type)"),
                    "newTag": string("New image tag (for image type)"),
                    "digest": string("Image digest (for image type)"),
                },
                required=["path", "type", "value"],
            ),
            tool(
                ns,
                "kustomize_edit_remove",
                "Remove items from kustomization",
                {
                    "path": string("Path to kustomization directory"),
                    "type": string(
                        "What to remove",
                        enum=["resource", "patch", "transformer", "buildmetadata"],
                    ),
                    "file": string("File path to remove"),
                },
                required=["path", "type", "file"],
            ),
            tool(
                ns,
                "kustomize_cfg",
                "Run kustomize cfg commands (cat, count, grep, tree)",
                {
                    "command": string("cfg subcommand", enum=["cat", "count", "grep", "tree"]),
                    "path": string("Path to resources"),
                    "pattern": string("Pattern for grep"),
                },
                required=["command", "path"],
            ),
            tool(ns, "kustomize_version", "Show kustomize version"),
        )

    def builders(self) -> dict[str, Builder]:
        return {
            "kustomize_build": self._build,
            "kustomize_apply": self._apply,
            "kustomize_create": self._create,
            "kustomize_edit_add": self._edit_add,
            "kustomize_edit_set": self._edit_set,
            "kustomize_edit_remove": self._edit_remove,
            "kustomize_cfg": self._cfg,
            "kustomize_version": self._version,
        }

    # -- builders ---------------------------------------------------------

    def _build(self, p: Params) -> ToolPlan:
        args = ["build", p.string("path")]
        if p.flag("enableHelm"):
            args.append("--enable-helm")
        if load_restrictor := p.string("loadRestrictor"):
            args += ["--load-restrictor", load_restrictor]
        if output := p.string("output"):
            args += ["-o", output]
        return self.invoke(args)

    def _apply(self, p: Params) -> ToolPlan:
        args = ["apply", "-k", p.string("path"), *p.namespace_args()]
        for key, flag in (
            ("dryRun", "--dry-run=client"),
            ("serverSide", "--server-side"),
            ("prune", "--prune"),
        ):
            if p.flag(key):
                args.append(flag)
        return self.invoke(args, program=self.kubectl_program)

    def _create(self, p: Params) -> ToolPlan:
        # Without a path the shared default directory is used; concurrent
        # callers overwrite each other's file.
        directory = p.string("path") or str(self.staging_dir / DEFAULT_KUSTOMIZE_DIR)
        file_path = str(Path(directory) / KUSTOMIZATION_FILENAME)
        content = render_kustomization(
            p.strings("resources"),
            namespace=p.string("namespace"),
            name_prefix=p.string("namePrefix"),
            name_suffix=p.string("nameSuffix"),
        )
        return FileWrite(
            file=StagedFile(path=file_path, content=content),
            message=f"Created {file_path}",
        )

    def _edit_add(self, p: Params) -> ToolPlan:
        add_type = p.string("type")
        file = p.string("file")
        literal = p.string("literal")
        args = ["edit", "add", add_type]
        if add_type in ("label", "annotation"):
            args.append(literal)
        elif add_type in ("resource", "patch", "base"):
            args.append(file)
        elif add_type in ("configmap", "secret"):
            args.append(p.string("name"))
            if file:
                args.append(f"--from-file={file}")
            if literal:
                args.append(f"--from-literal={literal}")
        return self.invoke(args, cwd=p.string("path"))

    def _edit_set(self, p: Params) -> ToolPlan:
        set_type = p.string("type")
        value = p.string("value")
        if set_type == "image":
            value = image_arg(
                value,
                new_name=p.string("newName"),
                new_tag=p.string("newTag"),
                digest=p.string("digest"),
            )
        return self.invoke(["edit", "set", set_type, value], cwd=p.string("path"))

    def _edit_remove(self, p: Params) -> ToolPlan:
        return self.invoke(
            ["edit", "remove", p.string("type"), p.string("file")],
            cwd=p.string("path"),
        )

    def _cfg(self, p: Params) -> ToolPlan:
        command = p.string("command")
        args = ["cfg", command, p.string("path")]
        pattern = p.string("pattern")
        if pattern and command == "grep":
            args.append(pattern)
        return self.invoke(args)

    def _version(self, p: Params) -> ToolPlan:
        return self.invoke(["version"])
