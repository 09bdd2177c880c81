"""
WBEM Client — The intrinsic CIM operations the dump pipeline needs.

This module is responsible for all communication with the WBEM service. The
CIM-XML protocol itself is handled by pywbem.WBEMConnection; this client picks
the operation flags the dump uses, turns pywbem's objects into the records in
cim_objects, and maps pywbem's exceptions onto DumpError kinds the exporters
can branch on:

    pywbem.TimeoutError               -> OTHER (this call only)
    pywbem.AuthError                  -> TRANSPORT
    pywbem.ConnectionError            -> TRANSPORT
    pywbem.HTTPError 401 / 403        -> TRANSPORT
    HTTPError with "CIMError: unsupported-operation" -> NOT_SUPPORTED
    other pywbem.HTTPError            -> OTHER
    pywbem.CIMError CIM_ERR_NOT_SUPPORTED -> NOT_SUPPORTED
    other pywbem.CIMError             -> OTHER
    other pywbem.Error (parse errors) -> OTHER
    missing object in GetClass/GetInstance -> EMPTY_RESULT

Each call is bounded by its own timeout. A pywbem connection carries a fixed
timeout, so one connection is kept per distinct (rounded up) timeout value.

Pipeline context:
    Namespace discovery is used by the orchestrator; the remaining operations
    are used by the namespace, class and instance exporters.
"""

import itertools
import math
import time
from collections import deque
from typing import Dict, Iterable, List, Optional

import pywbem

from wbem_dump_shared import DumpError, ErrorKind, OutputManager, is_ignorable

from .cim_objects import CimInstance, InstancePath, QualifierDeclaration

# Namespaces that commonly host CIM_Namespace instances.
INTEROP_NAMESPACES = ("interop", "root/interop", "root/PG_InterOp")


class WBEMClient:
    """Client for the intrinsic CIM operations the dump needs.

    Attributes:
        url: Server URL (e.g., "https://host:5989").
        timeout: Default per-call timeout in seconds.
        verify_ssl: Whether to verify the server's TLS certificate.
        debug: If True, print each operation as it is sent.
    """

    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        timeout: float = 30,
        verify_ssl: bool = False,
        trace_output: Optional[OutputManager] = None,
        debug: bool = False,
    ):
        """Initialize the client.

        Args:
            url: Server URL; pywbem posts to its /cimom endpoint.
            username: HTTP basic auth user (empty = no auth).
            password: HTTP basic auth password.
            timeout: Default per-call timeout in seconds.
            verify_ssl: Verify the server certificate for https.
            trace_output: When set, every raw request and reply is written
                          to the output's trace directory.
            debug: Enable verbose output.
        """
        self.url = url
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.debug = debug
        self._creds = (username, password) if username else None
        self._trace_output = trace_output
        self._trace_ids = itertools.count(1)
        self._connections: Dict[int, pywbem.WBEMConnection] = {}

    # -----------------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------------

    def _connection(self, timeout: float) -> pywbem.WBEMConnection:
        key = max(1, math.ceil(timeout))
        conn = self._connections.get(key)
        if conn is None:
            conn = pywbem.WBEMConnection(
                self.url,
                creds=self._creds,
                no_verification=not self.verify_ssl,
                timeout=key,
            )
            # Keeps last_raw_request/last_raw_reply for the wire trace.
            conn.debug = self._trace_output is not None
            self._connections[key] = conn
        return conn

    def _call(self, method: str, target: str, timeout: Optional[float], **kwargs):
        """Run one pywbem operation, translating its exceptions.

        Raises:
            DumpError: classified as described in the module docstring.
        """
        timeout = timeout or self.timeout
        conn = self._connection(timeout)
        if self.debug:
            print(f"  {method} {target} (timeout {timeout}s)")

        try:
            return getattr(conn, method)(**kwargs)
        except pywbem.TimeoutError as e:
            raise DumpError(ErrorKind.OTHER, f"{method}: timed out after {timeout}s") from e
        except pywbem.AuthError as e:
            raise DumpError(
                ErrorKind.TRANSPORT, f"{method}: {e}, check WBEM_USERNAME/WBEM_PASSWORD"
            ) from e
        except pywbem.ConnectionError as e:
            raise DumpError(ErrorKind.TRANSPORT, f"{method}: connection to {self.url} failed: {e}") from e
        except pywbem.HTTPError as e:
            raise _http_error(method, e) from e
        except pywbem.CIMError as e:
            kind = ErrorKind.NOT_SUPPORTED if e.status_code == pywbem.CIM_ERR_NOT_SUPPORTED else ErrorKind.OTHER
            raise DumpError(
                kind,
                f"{method}: {e.status_code_name}: {e.status_description}",
                code=e.status_code,
                description=e.status_description,
            ) from e
        except pywbem.Error as e:
            raise DumpError(ErrorKind.OTHER, f"{method}: {e}") from e
        finally:
            self._trace(conn, method)

    def _trace(self, conn: pywbem.WBEMConnection, method: str):
        if self._trace_output is None:
            return
        trace_id = next(self._trace_ids)
        for direction, body in (
            ("request", conn.last_raw_request),
            ("response", conn.last_raw_reply),
        ):
            if body is None:
                continue
            if isinstance(body, bytes):
                body = body.decode("utf-8", errors="replace")
            self._trace_output.write_trace(f"{trace_id:06d}_{method}_{direction}.xml", body)

    # -----------------------------------------------------------------------
    # Intrinsic operations
    # -----------------------------------------------------------------------

    def enumerate_qualifier_types(
        self, namespace: str, timeout: Optional[float] = None
    ) -> List[QualifierDeclaration]:
        """EnumerateQualifiers: all qualifier type declarations in a namespace."""
        declarations = self._call("EnumerateQualifiers", namespace, timeout, namespace=namespace)
        return [QualifierDeclaration.from_cim(d) for d in declarations or []]

    def enumerate_class_names(
        self, namespace: str, deep: bool = True, timeout: Optional[float] = None
    ) -> List[str]:
        """EnumerateClassNames from the top of the hierarchy.

        Args:
            namespace: Target namespace.
            deep: Include every subclass, not just the root classes.
        """
        names = self._call(
            "EnumerateClassNames", namespace, timeout, namespace=namespace, DeepInheritance=deep
        )
        return list(names or [])

    def get_class(
        self,
        namespace: str,
        class_name: str,
        local_only: bool = False,
        include_qualifiers: bool = True,
        include_class_origin: bool = True,
        timeout: Optional[float] = None,
    ) -> str:
        """GetClass: the serialized CLASS element for class_name.

        Raises:
            DumpError: EMPTY_RESULT if the server returns no class.
        """
        klass = self._call(
            "GetClass",
            namespace,
            timeout,
            ClassName=class_name,
            namespace=namespace,
            LocalOnly=local_only,
            IncludeQualifiers=include_qualifiers,
            IncludeClassOrigin=include_class_origin,
        )
        if klass is None:
            raise DumpError(ErrorKind.EMPTY_RESULT, f"GetClass: no definition returned for {class_name}")
        return klass.tocimxmlstr()

    def enumerate_instance_names(
        self, namespace: str, class_name: str, timeout: Optional[float] = None
    ) -> List[InstancePath]:
        """EnumerateInstanceNames: paths of every instance of class_name (deep)."""
        names = self._call(
            "EnumerateInstanceNames", namespace, timeout, ClassName=class_name, namespace=namespace
        )
        return [InstancePath.from_instance_name(name, namespace) for name in names or []]

    def get_instance(
        self,
        namespace: str,
        instance_path: InstancePath,
        local_only: bool = False,
        include_qualifiers: bool = True,
        include_class_origin: bool = True,
        timeout: Optional[float] = None,
    ) -> CimInstance:
        """GetInstance for a path previously returned by enumerate_instance_names.

        Raises:
            DumpError: EMPTY_RESULT if the server returns no instance.
        """
        instance_name = instance_path.cim_name.copy()
        instance_name.namespace = namespace
        instance_name.host = None
        instance = self._call(
            "GetInstance",
            namespace,
            timeout,
            InstanceName=instance_name,
            LocalOnly=local_only,
            IncludeQualifiers=include_qualifiers,
            IncludeClassOrigin=include_class_origin,
        )
        if instance is None:
            raise DumpError(ErrorKind.EMPTY_RESULT, f"GetInstance: nothing returned for {instance_path}")
        return CimInstance.from_cim(instance)

    # -----------------------------------------------------------------------
    # Namespace discovery
    # -----------------------------------------------------------------------

    def enumerate_namespaces(
        self,
        seed_namespaces: Iterable[str],
        timeout: float = 30,
        call_timeout: float = 10,
    ) -> List[str]:
        """Discover every namespace the service exposes.

        Two sources are combined, in order:
          1. CIM_Namespace instances in the seed and interop namespaces
             (the Name key is the full namespace).
          2. A breadth-first walk of __Namespace instances starting at "root"
             and the seeds (each Name is a child of the queried namespace).

        Args:
            seed_namespaces: Namespaces to query first (e.g., ["root/cimv2"]).
            timeout: Deadline for the whole discovery in seconds.
            call_timeout: Upper bound for each individual call.

        Returns:
            Unique namespace names in discovery order.

        Raises:
            DumpError: TRANSPORT immediately; otherwise the last OTHER error,
                       or a timeout error, when nothing was discovered.
        """
        seeds = list(seed_namespaces)
        deadline = time.monotonic() + timeout
        found: List[str] = []
        last_error: Optional[DumpError] = None
        timed_out = False

        def add(namespace: str):
            if namespace and namespace not in found:
                found.append(namespace)

        def query(namespace: str, class_name: str) -> List[InstancePath]:
            nonlocal last_error, timed_out
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                timed_out = True
                return []
            try:
                return self.enumerate_instance_names(
                    namespace, class_name, timeout=min(call_timeout, remaining)
                )
            except DumpError as e:
                if e.kind is ErrorKind.TRANSPORT:
                    raise
                if not is_ignorable(e):
                    last_error = e
                if self.debug:
                    print(f"  {class_name} in {namespace}: {e}")
                return []

        candidates = seeds + [ns for ns in INTEROP_NAMESPACES if ns not in seeds]
        for namespace in candidates:
            for path in query(namespace, "CIM_Namespace"):
                add(path.key_value("Name") or "")

        queue = deque(["root"] + [ns for ns in seeds if ns != "root"])
        visited = set()
        while queue and not timed_out:
            namespace = queue.popleft()
            if namespace in visited:
                continue
            visited.add(namespace)
            children = query(namespace, "__Namespace")
            if children:
                add(namespace)
            for path in children:
                name = path.key_value("Name")
                if name:
                    child = f"{namespace}/{name}"
                    add(child)
                    queue.append(child)

        if not found:
            if last_error is not None:
                raise last_error
            if timed_out:
                raise DumpError(ErrorKind.OTHER, f"Namespace discovery timed out after {timeout}s")
        return found


def _http_error(method: str, error: pywbem.HTTPError) -> DumpError:
    if error.status in (401, 403):
        return DumpError(
            ErrorKind.TRANSPORT,
            f"{method}: HTTP {error.status}, check WBEM_USERNAME/WBEM_PASSWORD",
        )
    kind = ErrorKind.NOT_SUPPORTED if error.cimerror == "unsupported-operation" else ErrorKind.OTHER
    detail = f" ({error.cimerror})" if error.cimerror else ""
    return DumpError(kind, f"{method}: HTTP {error.status}{detail}")
