from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import traceback
from wasabi import TracebackPrinter, format_repr, table


get_error = TracebackPrinter(tb_base="flatarray", tb_exclude=("exceptions.py",))


class InvalidOffsetsError(ValueError):
    def __init__(self, reason, offsets, content_size):
        self.tb = traceback.extract_stack()
        title = f"Invalid offsets: {reason}"
        ValueError.__init__(
            self,
            get_error(
                title,
                f"Offsets: {format_repr(offsets)}",
                f"Content size: {content_size}",
                tb=self.tb,
            ),
        )


class OutOfBoundsError(IndexError):
    def __init__(self, what, value, limit):
        self.tb = traceback.extract_stack()
        title = f"Out of bounds: {what} {format_repr(value)} outside of {format_repr(limit)}"
        IndexError.__init__(self, get_error(title, tb=self.tb))


class RowLengthError(ValueError):
    def __init__(self, expected, got):
        self.tb = traceback.extract_stack()
        title = f"Row length mismatch: len() reported {expected}, but the row yielded {got} items"
        ValueError.__init__(self, get_error(title, tb=self.tb))


class ExpectedTypeError(TypeError):
    max_to_print_of_value = 200

    def __init__(self, bad_type, expected):
        if isinstance(expected, str):
            expected = [expected]
        self.tb = traceback.extract_stack()
        title = f"Expected type {'/'.join(expected)}, but got: {format_repr(bad_type)} ({type(bad_type)})"
        TypeError.__init__(
            self, get_error(title, tb=self.tb, highlight=format_repr(bad_type))
        )


class BorrowError(RuntimeError):
    def __init__(self, container, action):
        self.tb = traceback.extract_stack()
        title = f"Cannot {action}: {type(container).__name__} is exclusively borrowed by a mutable row iterator"
        RuntimeError.__init__(
            self,
            get_error(
                title,
                "Exhaust or close() the mutable iterator first.",
                tb=self.tb,
            ),
        )


class BuilderFinalizedError(RuntimeError):
    def __init__(self, action):
        self.tb = traceback.extract_stack()
        title = f"Cannot {action}: the builder was already finalized"
        RuntimeError.__init__(
            self,
            get_error(title, "Create a new FlatBuilder for another container.", tb=self.tb),
        )


class InvalidUTF8Error(ValueError):
    def __init__(self, row_index, error):
        self.tb = traceback.extract_stack()
        title = f"Row {row_index} is not valid UTF-8"
        ValueError.__init__(self, get_error(title, str(error), tb=self.tb))


class DeserializationError(ValueError):
    def __init__(
        self,
        name: str,
        errors: Optional[
            Union[Sequence[Mapping[str, Any]], List[Dict[str, Any]]]
        ] = None,
    ) -> None:
        """Custom error for serialized messages that can't be turned back into
        a container."""
        message = f"Cannot deserialize '{name}'"
        data = []
        for error in errors or []:
            err_loc = " -> ".join([str(p) for p in error.get("loc", [])])
            data.append((err_loc, error.get("msg")))
        result = [message]
        if data:
            result.append(table(data))
        ValueError.__init__(self, "\n\n" + "\n".join(result))
