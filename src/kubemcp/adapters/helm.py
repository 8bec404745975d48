"""helm adapter — package release tools."""

from __future__ import annotations

import json
from typing import Any, ClassVar

from kubemcp.adapters.base import Builder, CommandAdapter
from kubemcp.adapters.models import ToolPlan
from kubemcp.adapters.params import Params
from kubemcp.adapters.schema import boolean, integer, obj, string, string_array, tool
from kubemcp.protocols.mcp.models import ToolDefinition


def values_args(values: dict[str, Any]) -> list[str]:
    """Turn a ``values`` object into ``--set``/``--set-json`` flags.

    Booleans and integers go through ``--set``.  Strings, floats, objects
    and arrays go through ``--set-json``: helm splits ``--set`` values on
    commas and would re-type strings such as ``"1.25"`` or ``"true"``.
    ``null`` entries are skipped.
    """
    args: list[str] = []
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, bool):
            args += ["--set", f"{key}={'true' if value else 'false'}"]
        elif isinstance(value, int):
            args += ["--set", f"{key}={value}"]
        else:
            args += ["--set-json", f"{key}={json.dumps(value, separators=(',', ':'))}"]
    return args


class HelmAdapter(CommandAdapter):
    """Builds ``helm`` invocations for the ``helm_*`` tools."""

    namespace: ClassVar[str] = "helm"
    default_program: ClassVar[str] = "helm"

    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        ns = self.namespace
        return (
            tool(
                ns,
                "helm_install",
                "Install a Helm chart",
                {
                    "name": string("Release name"),
                    "chart": string("Chart reference (repo/chart or path)"),
                    "namespace": string("Kubernetes namespace"),
                    "values": obj("Values to override (key-value pairs)"),
                    "valuesFile": string("Path to values file"),
                    "version": string("Chart version"),
                    "createNamespace": boolean("Create namespace if not exists"),
                    "dryRun": boolean("Simulate installation"),
                    "wait": boolean("Wait for resources to be ready"),
                },
                required=["name", "chart"],
            ),
            tool(
                ns,
                "helm_upgrade",
                "Upgrade a Helm release",
                {
                    "name": string("Release name"),
                    "chart": string("Chart reference"),
                    "namespace": string("Kubernetes namespace"),
                    "values": obj("Values to override"),
                    "valuesFile": string("Path to values file"),
                    "version": string("Chart version"),
                    "install": boolean("Install if release doesn't exist"),
                    "dryRun": boolean("Simulate upgrade"),
                    "wait": boolean("Wait for resources to be ready"),
                    "reuseValues": boolean("Reuse existing values"),
                },
                required=["name", "chart"],
            ),
            tool(
                ns,
                "helm_uninstall",
                "Uninstall a Helm release",
                {
                    "name": string("Release name"),
                    "namespace": string("Kubernetes namespace"),
                    "keepHistory": boolean("Keep release history"),
                    "dryRun": boolean("Simulate uninstall"),
                },
                required=["name"],
            ),
            tool(
                ns,
                "helm_list",
                "List Helm releases",
                {
                    "namespace": string("Kubernetes namespace"),
                    "allNamespaces": boolean("List across all namespaces"),
                    "filter": string("Filter by release name regex"),
                    "deployed": boolean("Show deployed releases only"),
                    "failed": boolean("Show failed releases only"),
                    "pending": boolean("Show pending releases only"),
                },
            ),
            tool(
                ns,
                "helm_status",
                "Get status of a Helm release",
                {
                    "name": string("Release name"),
                    "namespace": string("Kubernetes namespace"),
                    "revision": integer("Specific revision"),
                },
                required=["name"],
            ),
            tool(
                ns,
                "helm_history",
                "Get release history",
                {
                    "name": string("Release name"),
                    "namespace": string("Kubernetes namespace"),
                    "max": integer("Maximum revisions to show"),
                },
                required=["name"],
            ),
            tool(
                ns,
                "helm_rollback",
                "Rollback a release to a previous revision",
                {
                    "name": string("Release name"),
                    "revision": integer("Revision number to rollback to"),
                    "namespace": string("Kubernetes namespace"),
                    "dryRun": boolean("Simulate rollback"),
                    "wait": boolean("Wait for resources to be ready"),
                },
                required=["name", "revision"],
            ),
            tool(
                ns,
                "helm_repo_add",
                "Add a Helm chart repository",
                {
                    "name": string("Repository name"),
                    "url": string("Repository URL"),
                    "username": string("Username for auth"),
                    "password": string("Password for auth"),
                    "forceUpdate": boolean("Replace existing repo"),
                },
                required=["name", "url"],
            ),
            tool(ns, "helm_repo_list", "List configured Helm repositories"),
            tool(
                ns,
                "helm_repo_update",
                "Update Helm repository cache",
                {"repos": string_array("Specific repos to update")},
            ),
            tool(
                ns,
                "helm_search",
                "Search for Helm charts",
                {
                    "keyword": string("Search keyword"),
                    "source": string("Search repos or Artifact Hub", enum=["repo", "hub"]),
                    "version": string("Version constraint"),
                    "versions": boolean("Show all versions"),
                },
                required=["keyword"],
            ),
            tool(
                ns,
                "helm_show",
                "Show chart information (values, readme, chart)",
                {
                    "chart": string("Chart reference"),
                    "info": string(
                        "What to show", enum=["all", "chart", "readme", "values", "crds"]
                    ),
                    "version": string("Chart version"),
                },
                required=["chart"],
            ),
            tool(
                ns,
                "helm_template",
                "Render chart templates locally",
                {
                    "name": string("Release name"),
                    "chart": string("Chart reference"),
                    "values": obj("Values to override"),
                    "valuesFile": string("Path to values file"),
                    "version": string("Chart version"),
                    "namespace": string("Namespace for resources"),
                },
                required=["name", "chart"],
            ),
            tool(
                ns,
                "helm_get",
                "Get release information (values, manifest, notes, hooks)",
                {
                    "name": string("Release name"),
                    "info": string(
                        "What to get", enum=["all", "values", "manifest", "notes", "hooks"]
                    ),
                    "namespace": string("Kubernetes namespace"),
                    "revision": integer("Specific revision"),
                },
                required=["name"],
            ),
        )

    def builders(self) -> dict[str, Builder]:
        return {
            "helm_install": self._install,
            "helm_upgrade": self._upgrade,
            "helm_uninstall": self._uninstall,
            "helm_list": self._list,
            "helm_status": self._status,
            "helm_history": self._history,
            "helm_rollback": self._rollback,
            "helm_repo_add": self._repo_add,
            "helm_repo_list": self._repo_list,
            "helm_repo_update": self._repo_update,
            "helm_search": self._search,
            "helm_show": self._show,
            "helm_template": self._template,
            "helm_get": self._get,
        }

    # -- builders ---------------------------------------------------------

    @staticmethod
    def _chart_args(p: Params) -> list[str]:
        """``--version``, ``-f`` and value overrides, in that order."""
        args: list[str] = []
        if version := p.string("version"):
            args += ["--version", version]
        if values_file := p.string("valuesFile"):
            args += ["-f", values_file]
        args += values_args(p.mapping("values"))
        return args

    def _install(self, p: Params) -> ToolPlan:
        args = ["install", p.string("name"), p.string("chart"), *p.namespace_args()]
        args += self._chart_args(p)
        if p.flag("createNamespace"):
            args.append("--create-namespace")
        if p.flag("dryRun"):
            args.append("--dry-run")
        if p.flag("wait"):
            args.append("--wait")
        return self.invoke(args)

    def _upgrade(self, p: Params) -> ToolPlan:
        args = ["upgrade", p.string("name"), p.string("chart"), *p.namespace_args()]
        args += self._chart_args(p)
        for key, flag in (
            ("install", "--install"),
            ("dryRun", "--dry-run"),
            ("wait", "--wait"),
            ("reuseValues", "--reuse-values"),
        ):
            if p.flag(key):
                args.append(flag)
        return self.invoke(args)

    def _uninstall(self, p: Params) -> ToolPlan:
        args = ["uninstall", p.string("name"), *p.namespace_args()]
        if p.flag("keepHistory"):
            args.append("--keep-history")
        if p.flag("dryRun"):
            args.append("--dry-run")
        return self.invoke(args)

    def _list(self, p: Params) -> ToolPlan:
        args = ["list"]
        args += ["--all-namespaces"] if p.flag("allNamespaces") else p.namespace_args()
        if filter_ := p.string("filter"):
            args += ["--filter", filter_]
        for key in ("deployed", "failed", "pending"):
            if p.flag(key):
                args.append(f"--{key}")
        return self.invoke(args)

    def _status(self, p: Params) -> ToolPlan:
        args = ["status", p.string("name"), *p.namespace_args()]
        revision = p.integer("revision")
        if revision is not None:
            args += ["--revision", str(revision)]
        return self.invoke(args)

    def _history(self, p: Params) -> ToolPlan:
        args = ["history", p.string("name"), *p.namespace_args()]
        max_ = p.integer("max")
        if max_ is not None:
            args += ["--max", str(max_)]
        return self.invoke(args)

    def _rollback(self, p: Params) -> ToolPlan:
        revision = p.integer("revision")
        args = [
            "rollback",
            p.string("name"),
            str(revision if revision is not None else 0),
            *p.namespace_args(),
        ]
        if p.flag("dryRun"):
            args.append("--dry-run")
        if p.flag("wait"):
            args.append("--wait")
        return self.invoke(args)

    def _repo_add(self, p: Params) -> ToolPlan:
        args = ["repo", "add", p.string("name"), p.string("url")]
        if username := p.string("username"):
            args += ["--username", username]
        if password := p.string("password"):
            args += ["--password", password]
        if p.flag("forceUpdate"):
            args.append("--force-update")
        return self.invoke(args)

    def _repo_list(self, p: Params) -> ToolPlan:
        return self.invoke(["repo", "list"])

    def _repo_update(self, p: Params) -> ToolPlan:
        return self.invoke(["repo", "update", *p.strings("repos")])

    def _search(self, p: Params) -> ToolPlan:
        source = "hub" if p.string("source") == "hub" else "repo"
        args = ["search", source, p.string("keyword")]
        if version := p.string("version"):
            args += ["--version", version]
        if p.flag("versions"):
            args.append("--versions")
        return self.invoke(args)

    def _show(self, p: Params) -> ToolPlan:
        args = ["show", p.string("info") or "all", p.string("chart")]
        if version := p.string("version"):
            args += ["--version", version]
        return self.invoke(args)

    def _template(self, p: Params) -> ToolPlan:
        args = ["template", p.string("name"), p.string("chart"), *p.namespace_args()]
        args += self._chart_args(p)
        return self.invoke(args)

    def _get(self, p: Params) -> ToolPlan:
        args = ["get", p.string("info") or "all", p.string("name"), *p.namespace_args()]
        revision = p.integer("revision")
        if revision is not None:
            args += ["--revision", str(revision)]
        return self.invoke(args)
