"""Schema model: procedure descriptors grouped into queries and mutations."""
from procwire.schema.model import ABSENT, ProcedureDescriptor, ProcedureType, Schema
from procwire.schema.naming import camel_case_name, normalize_procedure_name

__all__ = [
    "ABSENT",
    "ProcedureDescriptor",
    "ProcedureType",
    "Schema",
    "camel_case_name",
    "normalize_procedure_name",
]
