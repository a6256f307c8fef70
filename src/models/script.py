"""
Script-side data models

Type-safe structures produced by the macro extractor and consumed by the
module assembler.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass
class BalancedMatch:
    """
    Result of a balanced-delimiter scan

    Returned by scanner.balanced_match() when the matching close delimiter
    is found.

    Attributes:
        content: Text strictly between the open and close delimiters
        end: Index of the matching close delimiter

    Example:
        For text "f(a, (b))" scanned from index 1:
        BalancedMatch(content="a, (b)", end=8)
    """
    content: str
    end: int


@dataclass
class MacroMatch:
    """
    A located macro call statement

    Attributes:
        start: Start of the statement (beginning of its line)
        end: End of the statement (past the optional semicolon and newline)
        type_param: Content of the <...> type argument, if present
        runtime_arg: Trimmed content of the (...) argument when no type argument
                     was given, if non-empty
        defaults: Defaults literal of withDefaults(defineProps<T>(), defaults)
    """
    start: int
    end: int
    type_param: Optional[str] = None
    runtime_arg: Optional[str] = None
    defaults: Optional[str] = None


@dataclass
class MacroDecl:
    """
    One declaration macro (defineProps, defineEmits, defineSlots, ...)

    Either the type-literal form (type), the runtime-literal form (runtime),
    or neither for a bare call such as defineEmits().
    """
    type: Optional[str] = None
    runtime: Optional[str] = None
    defaults: Optional[str] = None


@dataclass
class ModelMacro:
    """
    A const NAME = defineModel<T>("name", { options }) binding

    Attributes:
        variable_name: Local binding name (e.g. "visible")
        name: Public model name; None means the default "modelValue"
        type: Type argument (e.g. "boolean")
        options: Options literal (e.g. "{ default: false }")
    """
    variable_name: str
    name: Optional[str] = None
    type: Optional[str] = None
    options: Optional[str] = None

    @property
    def prop_name(self) -> str:
        """Public prop name the model reads from"""
        return self.name or "modelValue"


@dataclass
class NamedImport:
    """
    One {imported as local} pair of an import statement

    type_only marks a single "type X" item inside a value import.
    """
    imported: str
    local: str
    type_only: bool = False


@dataclass
class ImportInfo:
    """
    A structured import statement

    Attributes:
        source: Module specifier (e.g. "vue", "./Card.vue")
        default_import: Default binding name, if any
        named_imports: Named bindings in order (deduplicated by imported name on merge)
        namespace_import: Binding of an "* as name" import, if any
        type_only: Whole statement written as "import type ..."
    """
    source: str
    default_import: Optional[str] = None
    named_imports: List[NamedImport] = field(default_factory=list)
    namespace_import: Optional[str] = None
    type_only: bool = False

    def copy(self) -> "ImportInfo":
        """Return a copy whose named list can be mutated independently"""
        return ImportInfo(
            source=self.source,
            default_import=self.default_import,
            named_imports=[NamedImport(n.imported, n.local, n.type_only) for n in self.named_imports],
            namespace_import=self.namespace_import,
            type_only=self.type_only,
        )

    def locals_get(self) -> Set[str]:
        """Local names bound by this import"""
        names = {n.local for n in self.named_imports}
        if self.default_import:
            names.add(self.default_import)
        if self.namespace_import:
            names.add(self.namespace_import)
        return names


@dataclass
class ExtractedMacros:
    """
    Everything the macro extractor pulls out of a <script setup> block

    Attributes:
        props: defineProps / withDefaults declaration
        emits: defineEmits declaration
        slots: defineSlots declaration
        expose: defineExpose argument
        options: defineOptions argument
        models: defineModel bindings in source order
        body: Script body with macros, imports and exports removed
        imports: Structured import statements
        raw_imports: Side-effect imports, verbatim
        raw_exports: Export statements, verbatim
    """
    props: Optional[MacroDecl] = None
    emits: Optional[MacroDecl] = None
    slots: Optional[MacroDecl] = None
    expose: Optional[MacroDecl] = None
    options: Optional[MacroDecl] = None
    models: List[ModelMacro] = field(default_factory=list)
    body: str = ""
    imports: List[ImportInfo] = field(default_factory=list)
    raw_imports: List[str] = field(default_factory=list)
    raw_exports: List[str] = field(default_factory=list)


@dataclass
class PropInfo:
    """One member of a props type literal (e.g. "title?: string")"""
    name: str
    type: str
    optional: bool = False


@dataclass
class RuntimeType:
    """
    Runtime constructor expression for a TypeScript type

    Attributes:
        expr: Runtime expression (e.g. "String", "Array as PropType<string[]>")
        needs_prop_type: The expression references PropType
    """
    expr: str
    needs_prop_type: bool = False


@dataclass
class IdentifierSets:
    """
    Names that need rewriting when template expressions move into JSX

    Attributes:
        refs: Bindings that need a trailing .value
        props: Component input names that need a props. prefix
    """
    refs: Set[str] = field(default_factory=set)
    props: Set[str] = field(default_factory=set)
