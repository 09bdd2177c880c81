"""
CIM Objects — The records the exporters work with.

pywbem returns rich CIM objects (CIMInstanceName, CIMInstance, CIMClass,
CIMQualifierDeclaration). The exporters only need a few things from them: a
canonical string per instance path for deduplication and the manifest, the
owning class of an instance, and the CIM-XML text to write to disk. This
module reduces pywbem's objects to those records.

Instance paths are turned into a canonical string so that the same instance
compares equal no matter which class enumeration produced it:

    root/cimv2:CIM_Foo.CreationClassName="CIM_Foo",Id=3
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import pywbem


@dataclass(frozen=True)
class InstancePath:
    """An instance path plus the namespace it lives in.

    keybindings holds (name, valuetype, value) triples sorted by lower-cased
    name, where valuetype is "string", "numeric", "boolean" or "reference";
    reference values are the canonical string of the referenced path. The
    pywbem CIMInstanceName is kept so the path can be passed back to
    GetInstance; it does not take part in equality.
    """

    namespace: str
    class_name: str
    keybindings: Tuple[Tuple[str, str, str], ...] = ()
    cim_name: Optional[pywbem.CIMInstanceName] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_instance_name(cls, name: pywbem.CIMInstanceName, namespace: str) -> "InstancePath":
        namespace = name.namespace or namespace
        bindings = [
            (key, *_key_value(value, namespace)) for key, value in name.keybindings.items()
        ]
        bindings.sort(key=lambda binding: binding[0].lower())
        return cls(
            namespace=namespace,
            class_name=name.classname,
            keybindings=tuple(bindings),
            cim_name=name,
        )

    def key_value(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, _valuetype, value in self.keybindings:
            if key.lower() == lowered:
                return value
        return None

    def __str__(self) -> str:
        text = f"{self.namespace}:{self.class_name}"
        if not self.keybindings:
            return text
        bindings = [
            f"{key}={_format_key_value(valuetype, value)}"
            for key, valuetype, value in self.keybindings
        ]
        return f"{text}.{','.join(bindings)}"


@dataclass(frozen=True)
class QualifierDeclaration:
    name: str
    xml: str

    @classmethod
    def from_cim(cls, declaration: pywbem.CIMQualifierDeclaration) -> "QualifierDeclaration":
        return cls(name=declaration.name, xml=declaration.tocimxmlstr())


@dataclass(frozen=True)
class CimInstance:
    """A fetched instance; class_name is the instance's own class."""

    class_name: str
    xml: str

    @classmethod
    def from_cim(cls, instance: pywbem.CIMInstance) -> "CimInstance":
        return cls(class_name=instance.classname, xml=instance.tocimxmlstr())


def _key_value(value, namespace: str) -> Tuple[str, str]:
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "boolean", "TRUE" if value else "FALSE"
    if isinstance(value, pywbem.CIMInstanceName):
        return "reference", str(InstancePath.from_instance_name(value, namespace))
    if isinstance(value, int):
        return "numeric", str(int(value))
    if isinstance(value, float):
        return "numeric", repr(float(value))
    return "string", str(value)


def _format_key_value(valuetype: str, value: str) -> str:
    if valuetype in ("numeric", "boolean"):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
