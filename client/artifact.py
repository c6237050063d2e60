#!/usr/bin/env python3
# client/artifact.py
# Contract artifacts: function ABIs, storage layout and note types.
#
# Two input shapes are accepted:
#   - an already-loaded artifact: {"name", "functions": [...],
#     "storageLayout": {name: {"slot": hex}}, "notes": {name: {"id": hex, "typ": name}}}
#   - a compiled contract as emitted by the compiler ("noir_version" present),
#     whose storage layout and note types sit under outputs.globals.
# Anything else raises ArtifactMismatch.

import json

from errors import ArtifactMismatch
from notes import Fr

FUNCTION_TYPE_SECRET = "secret"
FUNCTION_TYPE_OPEN = "open"
FUNCTION_TYPE_UNCONSTRAINED = "unconstrained"

FUNCTION_TYPES = (FUNCTION_TYPE_SECRET, FUNCTION_TYPE_OPEN, FUNCTION_TYPE_UNCONSTRAINED)


class FunctionArtifact:
    def __init__(self, name, function_type, parameters, return_types=None):
        if function_type not in FUNCTION_TYPES:
            raise ArtifactMismatch(f"function {name}: unknown function type {function_type!r}")
        self.name = name
        self.function_type = function_type
        self.parameters = list(parameters)
        self.return_types = list(return_types or [])

    def is_unconstrained(self):
        return self.function_type == FUNCTION_TYPE_UNCONSTRAINED

    def parameter_names(self):
        return [p.get("name", "") for p in self.parameters]


class ContractArtifact:
    """
    Parsed artifact. storage_layout maps a storage variable name to its slot
    (Fr), notes maps a note type name to its type id (Fr).
    """

    def __init__(self, name, functions, storage_layout, notes):
        self.name = name
        self.functions = {}
        for f in functions:
            self.functions[f.name] = f
        self.storage_layout = dict(storage_layout)
        self.notes = dict(notes)

    def get_function(self, name):
        if name not in self.functions:
            raise ArtifactMismatch(f"contract {self.name} has no function {name!r}")
        return self.functions[name]

    def storage_slot(self, variable):
        """Slot of a storage variable, e.g. storage_slot("pending_shields")."""
        if variable not in self.storage_layout:
            raise ArtifactMismatch(f"contract {self.name} has no storage variable {variable!r}")
        return self.storage_layout[variable]

    def note_type_id(self, note_name):
        """Type id of a note, e.g. note_type_id("TransparentNote")."""
        if note_name not in self.notes:
            raise ArtifactMismatch(f"contract {self.name} has no note type {note_name!r}")
        return self.notes[note_name]


# ---------------- already-loaded form ----------------
def _parse_loaded(data):
    functions = []
    for f in data["functions"]:
        functions.append(
            FunctionArtifact(
                name=f["name"],
                function_type=f["functionType"],
                parameters=f.get("parameters", []),
                return_types=f.get("returnTypes", []),
            )
        )

    storage_layout = {}
    for var_name, entry in data.get("storageLayout", {}).items():
        storage_layout[var_name] = Fr(entry["slot"])

    notes = {}
    for note_name, entry in data.get("notes", {}).items():
        notes[note_name] = Fr(entry["id"])

    return ContractArtifact(data["name"], functions, storage_layout, notes)


# ---------------- compiled form ----------------
def _struct_field(struct_value, field_name):
    for field in struct_value.get("fields", []):
        if field.get("name") == field_name:
            return field["value"]
    raise KeyError(field_name)


def _compiled_function_type(f):
    if f.get("is_unconstrained"):
        return FUNCTION_TYPE_UNCONSTRAINED
    attrs = f.get("custom_attributes", [])
    if "aztec(public)" in attrs or "public" in attrs:
        return FUNCTION_TYPE_OPEN
    return FUNCTION_TYPE_SECRET


def _compiled_storage_layout(globals_):
    # The first storage struct belongs to the contract itself; later ones
    # come from imported contracts.
    storage = globals_.get("storage", [])
    if not storage:
        return {}
    fields = _struct_field(storage[0], "fields")
    layout = {}
    for entry in fields.get("fields", []):
        slot_value = _struct_field(entry["value"], "slot")
        layout[entry["name"]] = Fr(int(slot_value["value"], 16))
    return layout


def _compiled_notes(globals_):
    notes = {}
    for tup in globals_.get("notes", []):
        id_value, name_value = tup["fields"][0], tup["fields"][1]
        notes[name_value["value"]] = Fr(int(id_value["value"], 16))
    return notes


def _parse_compiled(data):
    functions = []
    for f in data["functions"]:
        abi = f.get("abi", {})
        functions.append(
            FunctionArtifact(
                name=f["name"],
                function_type=_compiled_function_type(f),
                parameters=abi.get("parameters", []),
                return_types=[abi["return_type"]["abi_type"]] if abi.get("return_type") else [],
            )
        )
    globals_ = data.get("outputs", {}).get("globals", {})
    return ContractArtifact(
        data["name"],
        functions,
        _compiled_storage_layout(globals_),
        _compiled_notes(globals_),
    )


def load_contract_artifact(data):
    """
    Parse an artifact given as a dict (already decoded JSON).
    Raise ArtifactMismatch on any structural problem.
    """
    if not isinstance(data, dict):
        raise ArtifactMismatch("contract artifact must be a JSON object")
    if "name" not in data or "functions" not in data:
        raise ArtifactMismatch("contract artifact lacks name or functions")

    try:
        if "noir_version" in data:
            return _parse_compiled(data)
        return _parse_loaded(data)
    except ArtifactMismatch:
        raise
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ArtifactMismatch(f"malformed contract artifact {data.get('name')!r}: {e!r}") from e


def load_contract_artifact_file(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ArtifactMismatch(f"contract artifact not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ArtifactMismatch(f"contract artifact is not valid JSON: {path}: {e}") from e
    return load_contract_artifact(data)
