"""Document domain models.

A document is a list of paragraphs; a paragraph is a list of inline nodes,
each either a run of plain text or an atomic reference token.

Positions inside a document are cursor offsets: every text character takes
one position, every reference token takes exactly one position, and every
boundary between two paragraphs takes one position.
"""

from typing import Annotated, Iterable, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

ReferenceKind = Literal["block", "page"]

# Stand-in for a reference token in the plain text view of a document
OBJECT_REPLACEMENT = "\ufffc"
PARAGRAPH_BREAK = "\n"


class TextRun(BaseModel):
    """A contiguous span of plain characters."""

    type: Literal["text"] = "text"
    text: str


class ReferenceToken(BaseModel):
    """An atomic, non-editable reference to a block or a page.

    Attributes:
        kind: "block" or "page"
        id: Block uid, or the page title for pages parsed from a canonical string
        preview_text: Short text shown in place of the reference
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["reference"] = "reference"
    kind: ReferenceKind
    id: str
    preview_text: str

    @property
    def identity(self) -> tuple[str, str]:
        return (self.kind, self.id)


Inline = Annotated[Union[TextRun, ReferenceToken], Field(discriminator="type")]

# A single cursor position: one character (a paragraph break is "\n") or one token
Atom = Union[str, ReferenceToken]


class Paragraph(BaseModel):
    """An ordered sequence of text runs and reference tokens."""

    content: list[Inline] = []


class Document(BaseModel):
    """A composer document, edited through cursor offsets."""

    paragraphs: list[Paragraph] = Field(default_factory=lambda: [Paragraph()])

    @classmethod
    def from_atoms(cls, atoms: Iterable[Atom]) -> "Document":
        """Build a normalized document from a flat sequence of atoms."""
        paragraphs = [Paragraph()]
        buffer: list[str] = []

        def flush() -> None:
            if buffer:
                paragraphs[-1].content.append(TextRun(text="".join(buffer)))
                buffer.clear()

        for atom in atoms:
            if isinstance(atom, ReferenceToken):
                flush()
                paragraphs[-1].content.append(atom)
            elif atom == PARAGRAPH_BREAK:
                flush()
                paragraphs.append(Paragraph())
            else:
                buffer.append(atom)
        flush()

        return cls(paragraphs=paragraphs)

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls.from_atoms(_expand([text]))

    def atoms(self) -> list[Atom]:
        atoms: list[Atom] = []
        for index, paragraph in enumerate(self.paragraphs):
            if index:
                atoms.append(PARAGRAPH_BREAK)
            for node in paragraph.content:
                if isinstance(node, ReferenceToken):
                    atoms.append(node)
                else:
                    atoms.extend(_expand([node.text]))
        return atoms

    @property
    def length(self) -> int:
        return len(self.atoms())

    def plain_text(self) -> str:
        """Text view in which offsets equal cursor offsets (tokens become U+FFFC)."""
        return "".join(
            OBJECT_REPLACEMENT if isinstance(atom, ReferenceToken) else atom
            for atom in self.atoms()
        )

    def tokens(self) -> list[ReferenceToken]:
        return [atom for atom in self.atoms() if isinstance(atom, ReferenceToken)]

    def has_text(self) -> bool:
        return bool(self.plain_text().replace(OBJECT_REPLACEMENT, "").strip())

    def has_references(self) -> bool:
        return bool(self.tokens())

    def is_empty(self) -> bool:
        return self.length == 0

    def normalized(self) -> "Document":
        """Copy with adjacent runs merged, empty runs dropped and newlines split out."""
        return Document.from_atoms(self.atoms())

    def normalize(self) -> None:
        self.paragraphs = self.normalized().paragraphs

    def slice(self, start: int, end: int) -> list[Atom]:
        self._check_range(start, end)
        return self.atoms()[start:end]

    def replace(self, start: int, end: int, items: Sequence[Atom]) -> int:
        """Replace positions [start, end) with the given text and tokens.

        Strings may be longer than one character; newlines in them become
        paragraph breaks. Returns the cursor offset right after the inserted
        content.
        """
        self._check_range(start, end)
        atoms = self.atoms()
        inserted = _expand(items)
        atoms[start:end] = inserted
        self.paragraphs = Document.from_atoms(atoms).paragraphs
        return start + len(inserted)

    def insert_text(self, offset: int, text: str) -> int:
        return self.replace(offset, offset, [text])

    def insert_token(self, offset: int, token: ReferenceToken) -> int:
        return self.replace(offset, offset, [token])

    def delete(self, start: int, end: int) -> int:
        return self.replace(start, end, [])

    def _check_range(self, start: int, end: int) -> None:
        length = self.length
        if not 0 <= start <= end <= length:
            raise ValueError(f"Invalid range [{start}, {end}) for document of length {length}")


def _expand(items: Iterable[Atom]) -> list[Atom]:
    atoms: list[Atom] = []
    for item in items:
        if isinstance(item, ReferenceToken):
            atoms.append(item)
        else:
            atoms.extend(item.replace("\r\n", PARAGRAPH_BREAK).replace("\r", PARAGRAPH_BREAK))
    return atoms
