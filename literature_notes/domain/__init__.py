"""Domain models, configuration schemas and the template engine

This module provides the domain layer for the literature notes pipeline,
including type-safe configuration schemas, the normalized entry model, the
Library Index and the logic-less template engine.
"""

from .config import (
    AppConfig,
    ConfigError,
    ConfigMissingError,
    EditorConfig,
    LibraryConfig,
    LiteratureNoteConfig,
    MissingArgumentError,
    TemplatesConfig,
    VaultConfig,
    register_configs,
)
from .exceptions import (
    DecodeError,
    LibraryError,
    ParseError,
    TemplateSyntaxError,
    UnknownCitekeyError,
)
from .library import Library, load_library
from .models import (
    Author,
    Entry,
    Found,
    NoteFile,
    NotFound,
    SynthesizedNote,
    normalize,
)
from .note_formatter import NoteFormatter
from .template_engine import (
    CompiledTemplate,
    NoteTemplates,
    compile_note_templates,
    compile_template,
    render,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "ConfigMissingError",
    "EditorConfig",
    "LibraryConfig",
    "LiteratureNoteConfig",
    "MissingArgumentError",
    "TemplatesConfig",
    "VaultConfig",
    "register_configs",
    "LibraryError",
    "DecodeError",
    "ParseError",
    "TemplateSyntaxError",
    "UnknownCitekeyError",
    "Library",
    "load_library",
    "Author",
    "Entry",
    "Found",
    "NotFound",
    "NoteFile",
    "SynthesizedNote",
    "normalize",
    "NoteFormatter",
    "CompiledTemplate",
    "NoteTemplates",
    "compile_template",
    "compile_note_templates",
    "render",
]
