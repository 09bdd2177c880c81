"""
Instance Exporter — Dumps every instance of one class.

For a (namespace, class) pair:

  1. Enumerate instance paths. On failure the error text goes to the
     namespace's error.txt and the class is done.
  2. Write every path to {ns}/{ClassName}/instances.txt.
  3. Fetch each path not yet in the namespace's InstanceCache and write it to
     {ns}/{OwnerClass}/instance_{index}.xml, where OwnerClass is the class the
     instance itself reports and index is its position in this enumeration.

A failed fetch is recorded in the cache and the loop moves on to the next
path. Only TRANSPORT and IO errors escape.

Because the index comes from the enumerating class but the directory from the
owning class, two instances can map to the same file. The later write wins and
a warning names the instance that replaced the earlier one.
"""

from dataclasses import dataclass
from typing import Optional

from wbem_dump_shared import DumpError, InstanceCache, OutputManager, describe, is_fatal, is_ignorable

from .wbem_client import WBEMClient


@dataclass
class InstanceExportResult:
    class_name: str
    enumerated: int = 0
    written: int = 0
    skipped: int = 0
    failed: int = 0
    enumeration_error: Optional[str] = None


class InstanceExporter:
    """Exports the instances of a class with cross-class deduplication."""

    def __init__(self, client: WBEMClient, output: OutputManager, timeout: float = 30, debug: bool = False):
        self.client = client
        self.output = output
        self.timeout = timeout
        self.debug = debug

    def export(self, namespace: str, class_name: str, cache: InstanceCache) -> InstanceExportResult:
        result = InstanceExportResult(class_name=class_name)

        try:
            paths = self.client.enumerate_instance_names(namespace, class_name, timeout=self.timeout)
        except DumpError as e:
            if is_fatal(e):
                raise
            self.output.write_error(namespace, str(e))
            result.enumeration_error = str(e)
            print(f"  {class_name} 0 {e}")
            if not is_ignorable(e):
                print(f"  Warning: {describe(e)}")
            return result

        result.enumerated = len(paths)
        print(f"  {class_name} {len(paths)}")
        if not paths:
            return result

        self.output.write_instance_manifest(namespace, class_name, [str(path) for path in paths])

        for index, path in enumerate(paths):
            key = str(path)
            if key in cache:
                result.skipped += 1
                continue

            try:
                instance = self.client.get_instance(namespace, path, timeout=self.timeout)
            except DumpError as e:
                if is_fatal(e):
                    raise
                cache.record_failure(key, e)
                result.failed += 1
                if not is_ignorable(e):
                    print(f"  Warning: {describe(e)}")
                continue

            owner_class = instance.class_name or path.class_name
            if self.output.has_instance(namespace, owner_class, index):
                print(
                    f"  Warning: {owner_class}/instance_{index}.xml was already written "
                    f"for another instance, overwriting it with {key}"
                )
            written_path = self.output.write_instance(namespace, owner_class, index, instance.xml)
            cache.record_success(key)
            result.written += 1
            if self.debug:
                print(f"    Saved {written_path}")

        return result
