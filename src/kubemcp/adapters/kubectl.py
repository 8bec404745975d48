"""kubectl adapter — cluster resource tools.

Argument vectors follow kubectl's own grammar: subcommand, positionals,
``-n <namespace>``, then feature flags.
"""

from __future__ import annotations

import shlex
from typing import ClassVar

from kubemcp.adapters.base import Builder, CommandAdapter
from kubemcp.adapters.models import StagedFile, ToolOutcome, ToolPlan
from kubemcp.adapters.params import Params
from kubemcp.adapters.schema import boolean, integer, obj, string, tool
from kubemcp.protocols.mcp.models import ToolDefinition

MANIFEST_FILENAME = "kubectl-manifest.yaml"

PORT_FORWARD_NOTE = "Note: Run this command manually as it requires an interactive session."


class KubectlAdapter(CommandAdapter):
    """Builds ``kubectl`` invocations for the ``kubectl_*`` tools."""

    namespace: ClassVar[str] = "kubectl"
    default_program: ClassVar[str] = "kubectl"

    @property
    def manifest_path(self) -> str:
        return str(self.staging_dir / MANIFEST_FILENAME)

    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        ns = self.namespace
        return (
            tool(
                ns,
                "kubectl_get",
                "Get Kubernetes resources (pods, deployments, services, etc.)",
                {
                    "resource": string(
                        "Resource type (pods, deployments, services, configmaps, "
                        "secrets, nodes, namespaces, etc.)"
                    ),
                    "name": string("Optional resource name"),
                    "namespace": string("Namespace (default: current)"),
                    "selector": string("Label selector (e.g., app=nginx)"),
                    "output": string("Output format", enum=["wide", "yaml", "json", "name"]),
                    "allNamespaces": boolean("List across all namespaces"),
                },
                required=["resource"],
            ),
            tool(
                ns,
                "kubectl_describe",
                "Show detailed information about a Kubernetes resource",
                {
                    "resource": string("Resource type"),
                    "name": string("Resource name"),
                    "namespace": string("Namespace"),
                },
                required=["resource", "name"],
            ),
            tool(
                ns,
                "kubectl_logs",
                "Print logs from a container in a pod",
                {
                    "pod": string("Pod name"),
                    "container": string("Container name (if multiple)"),
                    "namespace": string("Namespace"),
                    "tail": integer("Number of lines from end"),
                    "since": string("Only logs newer than duration (e.g., 5m, 1h)"),
                    "follow": boolean("Stream logs (returns snapshot)"),
                    "previous": boolean("Print previous instance logs"),
                },
                required=["pod"],
            ),
            tool(
                ns,
                "kubectl_apply",
                "Apply a configuration to a resource from a file or stdin",
                {
                    "manifest": string("YAML or JSON manifest content"),
                    "filename": string("Path to manifest file"),
                    "namespace": string("Namespace"),
                    "dryRun": boolean("Run in dry-run mode (client or server)"),
                },
            ),
            tool(
                ns,
                "kubectl_delete",
                "Delete Kubernetes resources",
                {
                    "resource": string("Resource type"),
                    "name": string("Resource name"),
                    "namespace": string("Namespace"),
                    "selector": string("Label selector"),
                    "force": boolean("Force deletion"),
                    "gracePeriod": integer("Grace period in seconds"),
                },
                required=["resource"],
            ),
            tool(
                ns,
                "kubectl_exec",
                "Execute a command in a container",
                {
                    "pod": string("Pod name"),
                    "command": string("Command to execute"),
                    "container": string("Container name"),
                    "namespace": string("Namespace"),
                },
                required=["pod", "command"],
            ),
            tool(
                ns,
                "kubectl_scale",
                "Scale a deployment, replicaset, or statefulset",
                {
                    "resource": string("Resource type (deployment, replicaset, statefulset)"),
                    "name": string("Resource name"),
                    "replicas": integer("Number of replicas"),
                    "namespace": string("Namespace"),
                },
                required=["resource", "name", "replicas"],
            ),
            tool(
                ns,
                "kubectl_rollout",
                "Manage rollouts (status, history, undo, restart)",
                {
                    "action": string(
                        "Rollout action",
                        enum=["status", "history", "undo", "restart", "pause", "resume"],
                    ),
                    "resource": string("Resource type (deployment, daemonset, statefulset)"),
                    "name": string("Resource name"),
                    "namespace": string("Namespace"),
                    "revision": integer("Revision number for undo"),
                },
                required=["action", "resource", "name"],
            ),
            tool(
                ns,
                "kubectl_port_forward",
                "Forward local port to a pod (returns connection info)",
                {
                    "resource": string("Resource (pod/name or svc/name)"),
                    "ports": string("Port mapping (local:remote)"),
                    "namespace": string("Namespace"),
                },
                required=["resource", "ports"],
            ),
            tool(
                ns,
                "kubectl_context",
                "Manage kubectl contexts (list, current, use)",
                {
                    "action": string("Context action", enum=["list", "current", "use"]),
                    "name": string("Context name for 'use' action"),
                },
                required=["action"],
            ),
            tool(
                ns,
                "kubectl_top",
                "Display resource usage (CPU/memory) for nodes or pods",
                {
                    "resource": string("Resource type", enum=["nodes", "pods"]),
                    "name": string("Optional resource name"),
                    "namespace": string("Namespace for pods"),
                    "containers": boolean("Show container metrics"),
                },
                required=["resource"],
            ),
            tool(
                ns,
                "kubectl_create",
                "Create resources (namespace, secret, configmap, etc.)",
                {
                    "resource": string("Resource type to create"),
                    "name": string("Resource name"),
                    "namespace": string("Namespace"),
                    "fromLiteral": obj("Key-value pairs for configmap/secret"),
                    "fromFile": string("File path for configmap/secret"),
                },
                required=["resource", "name"],
            ),
        )

    def builders(self) -> dict[str, Builder]:
        return {
            "kubectl_get": self._get,
            "kubectl_describe": self._describe,
            "kubectl_logs": self._logs,
            "kubectl_apply": self._apply,
            "kubectl_delete": self._delete,
            "kubectl_exec": self._exec,
            "kubectl_scale": self._scale,
            "kubectl_rollout": self._rollout,
            "kubectl_port_forward": self._port_forward,
            "kubectl_context": self._context,
            "kubectl_top": self._top,
            "kubectl_create": self._create,
        }

    # -- builders ---------------------------------------------------------

    def _get(self, p: Params) -> ToolPlan:
        args = ["get", p.string("resource")]
        if name := p.string("name"):
            args.append(name)
        # --all-namespaces replaces -n rather than combining with it
        args += ["--all-namespaces"] if p.flag("allNamespaces") else p.namespace_args()
        if selector := p.string("selector"):
            args += ["-l", selector]
        if output := p.string("output"):
            args += ["-o", output]
        return self.invoke(args)

    def _describe(self, p: Params) -> ToolPlan:
        return self.invoke(
            ["describe", p.string("resource"), p.string("name"), *p.namespace_args()]
        )

    def _logs(self, p: Params) -> ToolPlan:
        # "follow" is advertised but ignored: a finished process yields a snapshot.
        args = ["logs", p.string("pod"), *p.namespace_args()]
        if container := p.string("container"):
            args += ["-c", container]
        if since := p.string("since"):
            args += ["--since", since]
        tail = p.integer("tail")
        if tail is not None:
            args += ["--tail", str(tail)]
        if p.flag("previous"):
            args.append("--previous")
        return self.invoke(args)

    def _apply(self, p: Params) -> ToolPlan:
        args = ["apply", *p.namespace_args()]
        if p.flag("dryRun"):
            args.append("--dry-run=client")
        if filename := p.string("filename"):
            return self.invoke([*args, "-f", filename])
        # Shared default path: concurrent callers overwrite each other's manifest.
        staged = StagedFile(path=self.manifest_path, content=p.string("manifest"))
        return self.invoke([*args, "-f", staged.path], staged_file=staged)

    def _delete(self, p: Params) -> ToolPlan:
        args = ["delete", p.string("resource")]
        if name := p.string("name"):
            args.append(name)
        args += p.namespace_args()
        if selector := p.string("selector"):
            args += ["-l", selector]
        if p.flag("force"):
            args.append("--force")
        grace_period = p.integer("gracePeriod")
        if grace_period is not None:
            args += ["--grace-period", str(grace_period)]
        return self.invoke(args)

    def _exec(self, p: Params) -> ToolPlan:
        args = ["exec", p.string("pod"), *p.namespace_args()]
        if container := p.string("container"):
            args += ["-c", container]
        args += ["--", "sh", "-c", p.string("command")]
        return self.invoke(args)

    def _scale(self, p: Params) -> ToolPlan:
        replicas = p.integer("replicas")
        if replicas is None:
            replicas = 1
        return self.invoke(
            [
                "scale",
                f"{p.string('resource')}/{p.string('name')}",
                f"--replicas={replicas}",
                *p.namespace_args(),
            ]
        )

    def _rollout(self, p: Params) -> ToolPlan:
        args = [
            "rollout",
            p.string("action"),
            f"{p.string('resource')}/{p.string('name')}",
            *p.namespace_args(),
        ]
        revision = p.integer("revision")
        if revision is not None:
            args.append(f"--to-revision={revision}")
        return self.invoke(args)

    def _port_forward(self, p: Params) -> ToolPlan:
        # Port forwarding never completes, so it cannot be run here; hand the
        # command line back instead.
        command = shlex.join(
            [
                self.program,
                "port-forward",
                p.string("resource"),
                p.string("ports"),
                *p.namespace_args(),
            ]
        )
        return ToolOutcome.ok(f"Port forward: {command}\n{PORT_FORWARD_NOTE}")

    def _context(self, p: Params) -> ToolPlan:
        action = p.string("action")
        if action == "current":
            return self.invoke(["config", "current-context"])
        if action == "list":
            return self.invoke(["config", "get-contexts"])
        if action == "use":
            return self.invoke(["config", "use-context", p.string("name")])
        return ToolOutcome.error(f"Unknown action: {action}")

    def _top(self, p: Params) -> ToolPlan:
        resource = p.string("resource")
        args = ["top", resource]
        if name := p.string("name"):
            args.append(name)
        if resource == "pods":
            args += p.namespace_args()
        if p.flag("containers"):
            args.append("--containers")
        return self.invoke(args)

    def _create(self, p: Params) -> ToolPlan:
        args = ["create", p.string("resource"), p.string("name"), *p.namespace_args()]
        for key, value in p.mapping("fromLiteral").items():
            args.append(f"--from-literal={key}={_literal(value)}")
        if from_file := p.string("fromFile"):
            args.append(f"--from-file={from_file}")
        return self.invoke(args)


def _literal(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
