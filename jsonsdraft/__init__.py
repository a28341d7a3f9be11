import importlib

mod = "jsonsdraft"
class LazyLoader:
    """
    Lazy loader for the jsonsdraft functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "Draft": (f"{mod}.draft", "Draft"),
    "Position": (f"{mod}.draft", "Position"),
    "get_draft": (f"{mod}.draft", "get_draft"),
    "latest": (f"{mod}.draft", "latest"),
    "draft_from_url": (f"{mod}.draft", "draft_from_url"),
    "detect_draft": (f"{mod}.draft", "detect_draft"),
    "Resource": (f"{mod}.resources", "Resource"),
    "InvalidIdError": (f"{mod}.resources", "InvalidIdError"),
    "collect_resources": (f"{mod}.resources", "collect_resources"),
    "has_anchor": (f"{mod}.anchors", "has_anchor"),
    "SchemaRoot": (f"{mod}.root", "SchemaRoot"),
    "SchemaLoader": (f"{mod}.loader", "SchemaLoader"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    if name.startswith("__"):
        raise AttributeError(name)
    return getattr(_lazy_loader, name)
