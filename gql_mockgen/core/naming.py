"""Naming rules for emitted types and builders."""


def capitalize(name: str) -> str:
    """Upper-case the first character only (``getTodos`` -> ``GetTodos``)."""
    return name[:1].upper() + name[1:]


def operation_suffix(operation_type: str | None, add_suffix: bool = True) -> str:
    """``Query``/``Mutation``/``Subscription``; empty for fragments."""
    if not add_suffix or not operation_type or operation_type == "fragment":
        return ""
    return capitalize(operation_type)


def qualified_operation_name(operation_name: str, operation_type: str | None, add_suffix: bool = True) -> str:
    """``GetTodos`` + query -> ``GetTodosQuery``, without doubling the suffix."""
    suffix = operation_suffix(operation_type, add_suffix)
    if suffix and operation_name.endswith(suffix):
        return operation_name
    return f"{operation_name}{suffix}"


def _variant_part(mock_name: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        marker = f"{prefix}As"
        rest = mock_name[len(marker):]
        if mock_name.startswith(marker) and rest[:1].isupper():
            return rest
    return None


def type_name_for_mock(
    mock_name: str,
    operation_name: str | None = None,
    operation_type: str | None = None,
    add_suffix: bool = True,
) -> str:
    """Derive the emitted type name for a named mock.

    Examples:
        type_name_for_mock("GetTodoQueryAsTodo", "GetTodo", "query") -> "GetTodoQueryAsTodo"
        type_name_for_mock("GetTodoAsTodo", "GetTodo", "query")      -> "GetTodoQueryAsTodo"
        type_name_for_mock("GetTodos", "GetTodos", "query")          -> "GetTodosQuery"
        type_name_for_mock("AuthorFragment", "AuthorFragment", "fragment") -> "AuthorFragment"
    """
    if not operation_name:
        return capitalize(mock_name)

    base = qualified_operation_name(capitalize(operation_name), operation_type, add_suffix)
    variant = _variant_part(mock_name, (base, operation_name, capitalize(operation_name)))
    if variant:
        return f"{base}As{variant}"
    if mock_name.startswith(base):
        return mock_name
    return base


def builder_name(type_name: str) -> str:
    return f"a{type_name}"
