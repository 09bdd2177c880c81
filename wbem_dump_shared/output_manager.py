"""
Output Manager — Deterministic on-disk layout for dumped CIM objects.

All files land under a single output root (default: ./<host>). The layout is a
pure function of namespace, class name and instance index:

  {root}/{ns}/qa.xml                         Qualifier type declarations
  {root}/{ns}/{ClassName}.xml                Class definition
  {root}/{ns}/error.txt                      Last instance enumeration error
  {root}/{ns}/{ClassName}/instances.txt      Enumerated instance paths
  {root}/{ns}/{OwnerClass}/instance_{i}.xml  Fetched instance
  {root}/dump_results.json                   Run metadata
  {root}/trace/                              Wire trace (when enabled)

where {ns} and class segments are passed through sanitize_identifier().

Any failure to create a directory or write a file is raised as a DumpError of
kind IO, which aborts the run.
"""

import json
import os
from typing import Any, Dict, Iterable, List

from .errors import DumpError, ErrorKind
from .sanitizer import sanitize_identifier

XML_PROLOG = '<?xml version="1.0" encoding="utf-8"?>\n'

QUALIFIER_FILENAME = "qa.xml"
ERROR_FILENAME = "error.txt"
MANIFEST_FILENAME = "instances.txt"
RESULTS_FILENAME = "dump_results.json"
TRACE_DIRNAME = "trace"


class OutputManager:
    """Writes dumped objects into the output directory tree.

    Attributes:
        base_dir: Root output directory.
    """

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        self._instance_files = set()

    def ensure_dir(self, *segments: str) -> str:
        """Create (if needed) and return the directory base_dir/segments."""
        path = os.path.join(self.base_dir, *segments)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise DumpError(ErrorKind.IO, f"Cannot create directory {path}: {e}") from e
        return path

    def get_output_path(self, *segments: str) -> str:
        return os.path.join(self.base_dir, *segments)

    def namespace_segment(self, namespace: str) -> str:
        return sanitize_identifier(namespace)

    def write_text(self, segments: Iterable[str], content: str) -> str:
        """Write content to base_dir/segments, creating parent directories.

        Returns:
            The full path of the written file.
        """
        segments = list(segments)
        directory = self.ensure_dir(*segments[:-1])
        path = os.path.join(directory, segments[-1])
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise DumpError(ErrorKind.IO, f"Cannot write {path}: {e}") from e
        return path

    def write_qualifiers(self, namespace: str, declarations: Iterable[str]) -> str:
        """Write the aggregate qualifier declaration document for a namespace."""
        parts = [
            XML_PROLOG,
            '<CIM CIMVERSION="2.0" DTDVERSION="2.0">\n',
            "<DECLARATION>\n",
            "<DECLGROUP>\n",
        ]
        for declaration in declarations:
            parts.append(declaration)
            parts.append("\n")
        parts.append("</DECLGROUP>\n</DECLARATION>\n</CIM>\n")
        return self.write_text(
            [self.namespace_segment(namespace), QUALIFIER_FILENAME], "".join(parts)
        )

    def write_class_definition(self, namespace: str, class_name: str, class_xml: str) -> str:
        filename = f"{sanitize_identifier(class_name)}.xml"
        return self.write_text([self.namespace_segment(namespace), filename], class_xml)

    def write_error(self, namespace: str, error_text: str) -> str:
        # Overwritten by each failing class in the namespace.
        return self.write_text([self.namespace_segment(namespace), ERROR_FILENAME], error_text)

    def write_instance_manifest(self, namespace: str, class_name: str, paths: Iterable[str]) -> str:
        content = "".join(f"{path}\n" for path in paths)
        return self.write_text(
            [self.namespace_segment(namespace), sanitize_identifier(class_name), MANIFEST_FILENAME],
            content,
        )

    def _instance_segments(self, namespace: str, owner_class: str, index: int) -> List[str]:
        return [
            self.namespace_segment(namespace),
            sanitize_identifier(owner_class),
            f"instance_{index}.xml",
        ]

    def has_instance(self, namespace: str, owner_class: str, index: int) -> bool:
        """True if this OutputManager already wrote that instance file."""
        return tuple(self._instance_segments(namespace, owner_class, index)) in self._instance_files

    def write_instance(self, namespace: str, owner_class: str, index: int, instance_xml: str) -> str:
        segments = self._instance_segments(namespace, owner_class, index)
        path = self.write_text(segments, XML_PROLOG + instance_xml + "\n")
        self._instance_files.add(tuple(segments))
        return path

    def write_results(self, results: Dict[str, Any]) -> str:
        content = json.dumps(results, indent=2, default=str)
        return self.write_text([RESULTS_FILENAME], content)

    def write_trace(self, filename: str, content: str) -> str:
        return self.write_text([TRACE_DIRNAME, filename], content)
