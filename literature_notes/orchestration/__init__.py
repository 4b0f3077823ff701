"""Note synthesis, file materialization and state ownership"""

from literature_notes.orchestration.materializer import FileMaterializer
from literature_notes.orchestration.plugin import LiteratureNotes
from literature_notes.orchestration.synthesizer import NoteSynthesizer

__all__ = ["FileMaterializer", "LiteratureNotes", "NoteSynthesizer"]
