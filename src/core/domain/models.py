"""Domain models (Pydantic v2).

These mirror the backend's JSON payloads. They describe *what* a dictionary
entry, favorite or history row is, not *how* it is fetched.

Note:
- Every payload model ignores unknown keys; the backend adds fields freely.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class WordSummary(BaseModel):
    """A word as listed by the entries endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    word: str = Field(
        ...,
        min_length=1,
        description="The dictionary headword.",
    )
    entry_id: str | None = Field(
        default=None,
        alias="_id",
        description="Backend document id, when provided.",
    )


class DictionaryEntryRow(BaseModel):
    """One row of `GET /dictionary/entries/en` (`{fields: {word, _id}}`)."""

    model_config = ConfigDict(extra="ignore")

    fields: WordSummary


class Phonetic(BaseModel):
    """A pronunciation: IPA text and, sometimes, a link to an audio clip."""

    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    audio: str | None = None


class Definition(BaseModel):
    """One sense of a meaning, with an optional usage example."""

    model_config = ConfigDict(extra="ignore")

    definition: str = Field(default="")
    example: str | None = None


class Meaning(BaseModel):
    """Definitions grouped under one part of speech.

    Why it exists:
    - The detail panel shows one line per part of speech, so meanings keep
      their definitions together instead of flattening them.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    part_of_speech: str = Field(
        default="",
        alias="partOfSpeech",
        description="Grammatical category (noun, verb, ...).",
    )
    definitions: list[Definition] = Field(default_factory=list)

    @property
    def first_definition(self) -> str | None:
        """The definition shown in the detail panel (blank ones count as missing)."""

        if self.definitions and self.definitions[0].definition:
            return self.definitions[0].definition
        return None


class WordDetail(BaseModel):
    """Full entry for a single word."""

    model_config = ConfigDict(extra="ignore")

    word: str = Field(..., min_length=1)
    phonetics: list[Phonetic] = Field(
        default_factory=list,
        description="Pronunciations; the first one is the one displayed.",
    )
    meanings: list[Meaning] = Field(default_factory=list)

    @property
    def primary_phonetic(self) -> Phonetic | None:
        """First pronunciation, or None when the entry carries none."""

        return self.phonetics[0] if self.phonetics else None


class FavoriteEntry(BaseModel):
    """A word in the signed-in user's favorites.

    Note:
    - `added` is kept as the raw string the backend sends; it is only displayed.
    """

    model_config = ConfigDict(extra="ignore")

    word: str = Field(..., min_length=1)
    added: str = Field(
        default="",
        description="When the word was favorited, as sent by the backend.",
    )


class HistoryEntry(BaseModel):
    """A past lookup of the signed-in user."""

    model_config = ConfigDict(extra="ignore")

    word: str = Field(..., min_length=1)
    added: str = Field(
        default="",
        description="When the word was looked up, as sent by the backend.",
    )


class PageInfo(BaseModel):
    """Pagination envelope shared by the list endpoints."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_docs: int | None = Field(default=None, alias="totalDocs")
    page: int | None = None
    total_pages: int | None = Field(default=None, alias="totalPages")
    has_next: bool | None = Field(default=None, alias="hasNext")
    has_prev: bool | None = Field(default=None, alias="hasPrev")


class DictionaryEntriesPage(PageInfo):
    """One page of the entries endpoint."""

    results: list[DictionaryEntryRow] = Field(default_factory=list)

    def words(self) -> list[str]:
        """Headwords of this page, in server order (duplicates kept)."""

        return [row.fields.word for row in self.results]


class FavoritesPage(PageInfo):
    results: list[FavoriteEntry] = Field(default_factory=list)


class HistoryPage(PageInfo):
    results: list[HistoryEntry] = Field(default_factory=list)


class WordDetailResponse(BaseModel):
    """Envelope of `GET /dictionary/entries/en/{word}`; only `results[0]` is used."""

    model_config = ConfigDict(extra="ignore")

    results: list[WordDetail] = Field(default_factory=list)


class SignInCredentials(BaseModel):
    """Body of `POST /auth/signin`."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    name: str = ""


class AuthResponse(BaseModel):
    """Result of `POST /auth/signin`."""

    model_config = ConfigDict(extra="ignore")

    token: str = Field(..., min_length=1)
    user: AuthUser
