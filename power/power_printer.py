"""
A pretty-printer for the power wrappers and the builtins they hold.
"""
import collections.abc


class Printer:
    """Formats Map, PowerString and PowerArray values into readable text."""

    def __init__(self, indent_width=2):
        self._indent_char = " " * indent_width
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        # Subclasses of the wrappers and of builtin containers
        for base, handler in self._handlers.items():
            if isinstance(obj, base):
                return handler
        if isinstance(obj, collections.abc.Mapping): return self._pformat_dict
        # Default to Python's repr for unknown types
        return lambda o, l: repr(o)

    def _create_handlers(self):
        from power.power_map import Map
        from power.power_string import PowerString
        from power.power_array import PowerArray
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_primitive,
            type(None): self._pformat_primitive,
            list: self._pformat_list,
            tuple: self._pformat_tuple,
            dict: self._pformat_dict,
            Map: self._pformat_map,
            PowerString: self._pformat_power_string,
            PowerArray: self._pformat_power_array,
        }

    def _pformat_primitive(self, obj, level):
        return repr(obj)

    def _pformat_str(self, obj, level):
        return repr(obj)

    def _pformat_power_string(self, obj, level):
        return f"PowerString({obj.S!r})"

    def _pformat_block(self, lines, level, open_char, close_char):
        if not lines:
            return f"{open_char}{close_char}"
        outer_indent = self._indent_char * level
        inner_indent = self._indent_char * (level + 1)
        # Only the first line of each entry needs the inner indent; nested
        # blocks already indent their own continuation lines.
        body = [inner_indent + line for line in lines]
        return f"{open_char}\n" + ",\n".join(body) + f"\n{outer_indent}{close_char}"

    def _pformat_items(self, items, level):
        return [f"{self.pformat(k, level + 1)}: {self.pformat(v, level + 1)}" for k, v in items]

    def _pformat_dict(self, obj, level):
        return self._pformat_block(self._pformat_items(obj.items(), level), level, "{", "}")

    def _pformat_map(self, obj, level):
        return self._pformat_block(self._pformat_items(obj.as_mapping().items(), level), level, "Map{", "}")

    def _pformat_list(self, obj, level):
        return self._pformat_block([self.pformat(x, level + 1) for x in obj], level, "[", "]")

    def _pformat_tuple(self, obj, level):
        if not obj:
            return "()"
        return "(" + ", ".join(self.pformat(x, level) for x in obj) + ")"

    def _pformat_power_array(self, obj, level):
        return self._pformat_block([self.pformat(x, level + 1) for x in obj.A], level, "PowerArray[", "]")
