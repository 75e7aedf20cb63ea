"""Static file contents written when a project is initialised."""

_GITIGNORE_SECTIONS = (
    ("Binaries for programs and plugins", ("*.exe", "*.exe~", "*.dll", "*.so", "*.dylib")),
    ("Test binary, built with 'go test -c'", ("*.test",)),
    ("Output of the go coverage tool", ("*.out",)),
    ("Dependency directories", ("vendor/",)),
    ("Go workspace file", ("go.work",)),
    ("Environment variables", (".env",)),
    ("IDE specific files", (".idea/", ".vscode/", "*.swp", "*.swo")),
    ("OS specific files", (".DS_Store", "Thumbs.db")),
    ("Vers specific files", (".vers/",)),
)


def _render_ignore_file(sections):
    """Join commented pattern groups into ignore-file text."""
    blocks = ("\n".join((f"# {comment}", *patterns)) for comment, patterns in sections)
    return "\n\n".join(blocks) + "\n"


GITIGNORE_CONTENT = _render_ignore_file(_GITIGNORE_SECTIONS)