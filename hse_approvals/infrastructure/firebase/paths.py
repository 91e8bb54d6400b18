"""Realtime Database paths (schema-in-code).

The Realtime Database is a single JSON tree written by the web client. These
builders are the single source of truth for where each record lives. Every
dynamic component is validated first: a Realtime Database key cannot
contain . $ # [ ] / or control characters, and an unchecked "/" would let a
caller read a different node.

Example:
    from hse_approvals.infrastructure.firebase.paths import company_flow_path

    ref = db.reference(company_flow_path(company_id, "recruitment"))
    record = await ref.get()
"""

from hse_approvals.domain.exceptions import InvalidPathComponentError

NODE_COMPANIES = "companies"
NODE_USERS = "users"
NODE_FUNCTIONS = "functions"
NODE_APPROVAL_FLOWS = "approvalFlows"
NODE_APPROVALS = "approvals"
NODE_ORG_POSITIONS = "organizationStructure/positions"

_FORBIDDEN_KEY_CHARS = frozenset(".$#[]/")


def validate_path_component(name: str, value: str) -> str:
    """Return value if it is a usable database key, else raise.

    Raises:
        InvalidPathComponentError: If value is empty or contains a forbidden character.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidPathComponentError(name, str(value))
    for char in value:
        if char in _FORBIDDEN_KEY_CHARS or ord(char) < 0x20 or ord(char) == 0x7F:
            raise InvalidPathComponentError(name, value)
    return value


def company_flow_path(company_id: str, process_type: str) -> str:
    validate_path_component("company_id", company_id)
    validate_path_component("process_type", process_type)
    return f"{NODE_COMPANIES}/{company_id}/{NODE_APPROVAL_FLOWS}/{process_type}"


def global_flow_path(process_type: str) -> str:
    validate_path_component("process_type", process_type)
    return f"{NODE_APPROVAL_FLOWS}/{process_type}"


def company_user_path(company_id: str, user_id: str) -> str:
    validate_path_component("company_id", company_id)
    validate_path_component("user_id", user_id)
    return f"{NODE_COMPANIES}/{company_id}/{NODE_USERS}/{user_id}"


def global_user_path(user_id: str) -> str:
    validate_path_component("user_id", user_id)
    return f"{NODE_USERS}/{user_id}"


def company_function_path(company_id: str, function_id: str) -> str:
    validate_path_component("company_id", company_id)
    validate_path_component("function_id", function_id)
    return f"{NODE_COMPANIES}/{company_id}/{NODE_FUNCTIONS}/{function_id}"


def position_level_path(position_name: str) -> str:
    validate_path_component("position_name", position_name)
    return f"{NODE_ORG_POSITIONS}/{position_name}/level"


def subject_path(collection: str, subject_id: str) -> str:
    validate_path_component("collection", collection)
    validate_path_component("subject_id", subject_id)
    return f"{collection}/{subject_id}"


def approval_state_path(collection: str, subject_id: str) -> str:
    return f"{subject_path(collection, subject_id)}/{NODE_APPROVALS}"
