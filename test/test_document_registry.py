"""
Tests for the document registry

Tests current document selection, language fallback and variant collapse.
"""

from app.constants.legal import DocumentType
from app.services.document_registry import (
    current_documents,
    get_document,
    language_preference,
    list_current_documents,
    normalize_document_types,
)


class TestNormalizeDocumentTypes:
    def test_accepts_enums_and_strings(self):
        result = normalize_document_types([DocumentType.DPA, "privacy_policy"])
        assert result == ["dpa", "privacy_policy"]

    def test_deduplicates_in_first_seen_order(self):
        result = normalize_document_types(["privacy_policy", DocumentType.PRIVACY_POLICY, "dpa", "privacy_policy"])
        assert result == ["privacy_policy", "dpa"]


class TestLanguagePreference:
    def test_requested_language_first(self):
        assert language_preference("pl") == ["pl", "en"]

    def test_default_language_when_none(self):
        assert language_preference(None) == ["en", "pl"]

    def test_no_duplicates(self):
        assert language_preference("en") == ["en", "pl"]


class TestCurrentDocuments:
    """Test current_documents against the database"""

    async def test_only_published_current_documents(self, db, make_document):
        await make_document("terms_of_service", version=1, is_current=False)
        await make_document("terms_of_service", version=2, status="draft", is_current=True)
        current = await make_document("terms_of_service", version=3)

        documents = await current_documents(["terms_of_service"], "en", db)

        assert list(documents) == ["terms_of_service"]
        assert documents["terms_of_service"].id == current.id

    async def test_requested_language_wins(self, db, make_document):
        await make_document("privacy_policy", version=4, language="en")
        polish = await make_document("privacy_policy", version=2, language="pl")

        documents = await current_documents(["privacy_policy"], "pl", db)

        assert documents["privacy_policy"].id == polish.id

    async def test_falls_back_to_english(self, db, make_document):
        english = await make_document("privacy_policy", version=2, language="en")
        await make_document("privacy_policy", version=5, language="de")

        documents = await current_documents(["privacy_policy"], "fr", db)

        assert documents["privacy_policy"].id == english.id

    async def test_falls_back_to_any_language(self, db, make_document):
        german = await make_document("dpa", version=1, language="de")

        documents = await current_documents(["dpa"], "fr", db)

        assert documents["dpa"].id == german.id

    async def test_each_type_resolved_independently(self, db, make_document):
        polish_tos = await make_document("terms_of_service", version=1, language="pl")
        english_privacy = await make_document("privacy_policy", version=1, language="en")

        documents = await current_documents(["terms_of_service", "privacy_policy"], "pl", db)

        assert documents["terms_of_service"].id == polish_tos.id
        assert documents["privacy_policy"].id == english_privacy.id

    async def test_collapses_to_highest_version(self, db, make_document):
        await make_document("terms_of_service", version=1)
        newest = await make_document("terms_of_service", version=2)

        documents = await current_documents(["terms_of_service"], "en", db)

        assert documents["terms_of_service"].id == newest.id

    async def test_missing_types_are_absent(self, db, make_document):
        await make_document("terms_of_service")

        documents = await current_documents(["dpa", "terms_of_service"], "en", db)

        assert list(documents) == ["terms_of_service"]

    async def test_result_follows_request_order(self, db, make_document):
        await make_document("terms_of_service")
        await make_document("privacy_policy")

        documents = await current_documents(["privacy_policy", "terms_of_service"], "en", db)

        assert list(documents) == ["privacy_policy", "terms_of_service"]

    async def test_empty_request(self, db):
        assert await current_documents([], "en", db) == {}


class TestDocumentLookups:
    async def test_list_current_documents_one_per_type(self, db, make_document):
        await make_document("terms_of_service", language="en")
        await make_document("terms_of_service", language="pl")
        await make_document("dpa", language="en", acceptance_type="silent")

        documents = await list_current_documents("pl", db)

        assert sorted(d.document_type for d in documents) == ["dpa", "terms_of_service"]
        tos = next(d for d in documents if d.document_type == "terms_of_service")
        assert tos.language == "pl"

    async def test_get_document(self, db, make_document):
        document = await make_document("dpa")

        assert (await get_document(document.id, db)).document_type == "dpa"
        assert await get_document("missing", db) is None
