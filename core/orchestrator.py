"""
Dump Orchestrator — Run coordination for the WBEM dump.

This module ties the WBEM client and the exporters into one run:

  Step 1: RESOLVE TARGETS
      - WBEM_NAMESPACE and WBEM_CLASS both set: dump just that class (no
        discovery).
      - WBEM_NAMESPACE set: that namespace is the only target.
      - Otherwise: discover namespaces starting from root/cimv2, bounded by
        DISCOVERY_TIMEOUT. A discovery failure ends the run.

  Step 2: EXPORT NAMESPACES
      NamespaceExporter runs over each target in turn. Failures of individual
      classes and instances are printed and never end the run.

  Step 3: SAVE RESULTS
      Run metadata is written to dump_results.json in the output root.
      Class-names-only runs skip this step and create no output at all.

The run succeeds when at least one namespace was targeted and no fatal error
(TRANSPORT or IO, or a failed discovery) occurred.

Typical usage:
    config = load_config(env_file="./.env")
    orchestrator = DumpOrchestrator(config)
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from wbem_dump_shared import DumpError, InstanceCache, OutputManager, describe

from config import DEFAULT_SEED_NAMESPACE, ExportConfig

from .class_exporter import ClassExporter
from .namespace_exporter import NamespaceExporter
from .wbem_client import WBEMClient


class DumpOrchestrator:
    """Orchestrates a WBEM dump run.

    Attributes:
        config: The immutable ExportConfig for this run.
        output_manager: Writes the dump tree under config.output_dir.
        client: The WBEMClient all exporters share.
    """

    def __init__(
        self,
        config: ExportConfig,
        client: Optional[WBEMClient] = None,
        output_manager: Optional[OutputManager] = None,
    ):
        self.config = config
        self.output_manager = output_manager or OutputManager(config.output_dir)
        self.client = client or WBEMClient(
            config.url,
            username=config.username,
            password=config.password,
            timeout=config.request_timeout,
            verify_ssl=config.verify_ssl,
            trace_output=self.output_manager if config.trace and not config.only_class_names else None,
            debug=config.debug,
        )
        self.class_exporter = ClassExporter(
            self.client, self.output_manager, timeout=config.request_timeout, debug=config.debug
        )
        self.namespace_exporter = NamespaceExporter(
            self.client,
            self.output_manager,
            class_exporter=self.class_exporter,
            only_class_names=config.only_class_names,
            timeout=config.request_timeout,
            debug=config.debug,
        )

    def validate_config(self) -> bool:
        """Print every configuration problem and return False if there are any."""
        errors = self.config.validate()
        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def run(self) -> Dict[str, Any]:
        """Execute the dump.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - tool: "wbem-dump"
                - config: Connection settings (password omitted)
                - namespaces: The resolved target namespaces
                - results: Per-namespace summaries
                - success: True if targets were resolved and no fatal error occurred
                - error: Error message (if success=False)
        """
        results: Dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "tool": "wbem-dump",
            "config": self.config.to_summary(),
            "namespaces": [],
            "results": [],
            "success": False,
        }

        try:
            # Class-names-only mode prints and never touches the output tree.
            if not self.config.only_class_names:
                self.output_manager.ensure_dir()

            if self.config.namespace and self.config.class_name:
                results["namespaces"] = [self.config.namespace]
                results["results"].append(self._export_single_class())
                results["success"] = True
            else:
                namespaces = self._resolve_namespaces()
                results["namespaces"] = namespaces
                print(f"\nNamespaces: {namespaces}")

                for namespace in namespaces:
                    print(f"\n{'='*60}")
                    print(f"NAMESPACE: {namespace}")
                    print("="*60)
                    namespace_result = self.namespace_exporter.export(namespace)
                    results["results"].append(namespace_result.to_summary())

                if namespaces:
                    results["success"] = True
                else:
                    results["error"] = "No namespaces to export"

        except DumpError as e:
            results["error"] = describe(e)
            print(f"\n  ERROR: {describe(e)}")
            if self.config.debug:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        if not self.config.only_class_names:
            self._save_results(results)

        return results

    def _save_results(self, results: Dict[str, Any]):
        try:
            results_path = self.output_manager.write_results(results)
            print(f"\n  Results saved to: {results_path}")
        except DumpError as e:
            print(f"\n  Warning: could not save results: {e}")

    def _resolve_namespaces(self) -> List[str]:
        if self.config.namespace:
            return [self.config.namespace]

        print(f"\n{'='*60}")
        print("NAMESPACE DISCOVERY")
        print("="*60)
        return self.client.enumerate_namespaces(
            [DEFAULT_SEED_NAMESPACE],
            timeout=self.config.discovery_timeout,
            call_timeout=self.config.discovery_call_timeout,
        )

    def _export_single_class(self) -> Dict[str, Any]:
        namespace, class_name = self.config.namespace, self.config.class_name
        print(f"\n{'='*60}")
        print(f"CLASS: {namespace}:{class_name}")
        print("="*60)

        if self.config.only_class_names:
            print(f"    {class_name}")
            return {"namespace": namespace, "class": class_name}

        cache = InstanceCache()
        class_result = self.class_exporter.export(namespace, class_name, cache)
        for key, error in cache.failures():
            print(f"  {key} get failed: {error}")

        instances = class_result.instances
        return {
            "namespace": namespace,
            "class": class_name,
            "definition_written": class_result.definition_written,
            "instances_written": instances.written if instances else 0,
            "failed_instances": cache.failure_count,
            "error": instances.enumeration_error if instances else None,
        }

    def print_summary(self, results: Dict):
        """Print a human-readable run summary.

        Args:
            results: The dict returned by run().
        """
        print(f"\n{'='*60}")
        print("DUMP COMPLETE")
        print("="*60)
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")
        print(f"Output: {self.config.output_dir}")

        for summary in results.get("results", []):
            print(
                f"  {summary.get('namespace')}: "
                f"{summary.get('definitions_written', 0)} class definitions, "
                f"{summary.get('instances_written', 0)} instances, "
                f"{summary.get('failed_instances', 0)} failed"
            )

        if results.get("error"):
            print(f"Error: {results['error']}")
