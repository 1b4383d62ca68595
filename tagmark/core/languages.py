"""
Language detection from file names.

Maps file names and extensions to the editor-style language identifiers
used by the grammar table.
"""

from __future__ import annotations

import os
from pathlib import Path

# Whole file names that carry no useful extension
_FILE_NAMES: dict[str, str] = {
    'makefile': 'makefile',
    'gnumakefile': 'makefile',
    'dockerfile': 'dockerfile',
    'rakefile': 'ruby',
    'gemfile': 'ruby',
    'cmakelists.txt': 'plaintext',
}

_EXTENSIONS: dict[str, str] = {
    # C family
    '.c': 'c', '.h': 'c',
    '.cpp': 'cpp', '.cc': 'cpp', '.cxx': 'cpp', '.hpp': 'cpp', '.hh': 'cpp', '.hxx': 'cpp',
    '.cs': 'csharp',
    '.m': 'objective-c', '.mm': 'objective-cpp',
    '.java': 'java', '.kt': 'kotlin', '.kts': 'kotlin',
    '.scala': 'scala', '.groovy': 'groovy', '.gradle': 'groovy',
    '.go': 'go', '.rs': 'rust', '.swift': 'swift', '.dart': 'dart',
    '.fs': 'fsharp', '.fsx': 'fsharp', '.hx': 'haxe',
    '.pas': 'pascal', '.pp': 'pascal', '.dpr': 'objectpascal',
    '.php': 'php', '.v': 'verilog', '.sv': 'verilog',
    '.apex': 'apex', '.cls': 'apex', '.al': 'al', '.shader': 'shaderlab',
    # Web
    '.js': 'javascript', '.mjs': 'javascript', '.cjs': 'javascript',
    '.jsx': 'javascriptreact',
    '.ts': 'typescript', '.mts': 'typescript', '.cts': 'typescript',
    '.tsx': 'typescriptreact',
    '.vue': 'vue', '.jsonc': 'jsonc',
    '.css': 'css', '.scss': 'scss', '.sass': 'sass', '.less': 'less', '.styl': 'stylus',
    '.html': 'html', '.htm': 'html', '.xhtml': 'html',
    '.xml': 'xml', '.xsd': 'xml', '.xsl': 'xml', '.svg': 'svg',
    '.md': 'markdown', '.markdown': 'markdown',
    '.twig': 'twig', '.cfm': 'cfml', '.cfc': 'cfml',
    '.adoc': 'asciidoc', '.asciidoc': 'asciidoc',
    # Scripting
    '.py': 'python', '.pyw': 'python', '.pyi': 'python',
    '.rb': 'ruby', '.pl': 'perl', '.pm': 'perl', '.p6': 'perl6', '.raku': 'perl6',
    '.sh': 'shellscript', '.bash': 'shellscript', '.zsh': 'shellscript',
    '.ps1': 'powershell', '.psm1': 'powershell',
    '.coffee': 'coffeescript', '.gd': 'gdscript', '.jl': 'julia',
    '.r': 'r', '.tcl': 'tcl', '.ex': 'elixir', '.exs': 'elixir', '.nim': 'nim',
    '.lua': 'lua',
    '.yaml': 'yaml', '.yml': 'yaml', '.graphql': 'graphql', '.gql': 'graphql',
    '.tf': 'terraform', '.tfvars': 'terraform',
    # Query and data
    '.sql': 'sql', '.hql': 'hive-sql', '.pig': 'pig', '.pks': 'plsql', '.pkb': 'plsql',
    '.ado': 'stata', '.do': 'stata', '.sas': 'SAS', '.gen': 'genstat',
    # Functional
    '.hs': 'haskell', '.elm': 'elm', '.erl': 'erlang', '.hrl': 'erlang',
    '.clj': 'clojure', '.cljs': 'clojure', '.lisp': 'lisp', '.el': 'lisp', '.rkt': 'racket',
    # Other
    '.adb': 'ada', '.ads': 'ada', '.vb': 'vb', '.bas': 'vb', '.brs': 'brightscript',
    '.puml': 'diagram', '.plantuml': 'diagram',
    '.tex': 'latex', '.bib': 'bibtex', '.f90': 'fortran-modern', '.f95': 'fortran-modern',
    '.cob': 'COBOL', '.cbl': 'COBOL',
    '.txt': 'plaintext', '.text': 'plaintext', '.log': 'plaintext',
}

PLAIN_TEXT = 'plaintext'


def language_for_file(path: str | os.PathLike[str]) -> str:
    """
    Guess the language identifier of a file.

    Unknown files are treated as plain text.
    """
    name = Path(path).name.lower()

    if name in _FILE_NAMES:
        return _FILE_NAMES[name]

    _, ext = os.path.splitext(name)
    return _EXTENSIONS.get(ext, PLAIN_TEXT)
