"""
wbem-dump-shared — Building blocks shared by the WBEM dump pipeline.

  errors.py          ErrorKind enumeration and the DumpError exception.
  sanitizer.py       Flattening of namespaces and class names into path segments.
  instance_cache.py  Per-namespace record of instance fetch outcomes.
  output_manager.py  Deterministic on-disk layout for dumped objects.
"""

from .errors import DumpError, ErrorKind, describe, is_fatal, is_ignorable
from .sanitizer import sanitize_identifier
from .instance_cache import InstanceCache
from .output_manager import OutputManager
