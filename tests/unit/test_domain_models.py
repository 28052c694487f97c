import pytest

from docbatch.domain.models import (
    BatchStatus,
    BlobReference,
    Document,
    DocumentBatch,
    DocumentStatus,
    ValidationOutcome,
)


class TestValidationOutcome:
    def test_failure_from_single_message(self) -> None:
        outcome = ValidationOutcome.failure("bad")
        assert not outcome.valid
        assert outcome.errors == ("bad",)

    def test_success_keeps_schema(self) -> None:
        assert ValidationOutcome.success("DataSchema").schema == "DataSchema"


class TestDocument:
    def test_rejects_empty_id(self) -> None:
        with pytest.raises(ValueError, match="Document ID cannot be empty"):
            Document("  ", "dGVzdA==")

    def test_rejects_empty_content(self) -> None:
        with pytest.raises(ValueError, match="Encoded content cannot be empty"):
            Document("1", "")

    def test_starts_pending_and_invalid(self) -> None:
        doc = Document("1", "dGVzdA==")
        assert doc.status == DocumentStatus.PENDING
        assert not doc.is_valid

    def test_decoded_content_must_not_be_blank(self) -> None:
        doc = Document("1", "dGVzdA==")
        with pytest.raises(ValueError):
            doc.set_decoded_content(" ")

    def test_apply_validation_sets_fields(self) -> None:
        doc = Document("1", "dGVzdA==")
        doc.apply_validation(ValidationOutcome.failure(["a", "b"], schema="S"))
        assert doc.status == DocumentStatus.INVALID
        assert doc.validation_errors == ["a", "b"]
        assert doc.schema == "S"

    def test_invalid_document_cannot_be_sent_to_print(self) -> None:
        doc = Document("1", "dGVzdA==")
        with pytest.raises(ValueError, match="Cannot send invalid document 1"):
            doc.mark_sent_to_print()

    def test_valid_document_can_be_sent_to_print(self) -> None:
        doc = Document("1", "dGVzdA==")
        doc.apply_validation(ValidationOutcome.success())
        doc.mark_sent_to_print()
        assert doc.status == DocumentStatus.SENT_TO_PRINT


class TestDocumentBatch:
    def test_rejects_empty_batch_id(self) -> None:
        with pytest.raises(ValueError, match="Batch ID cannot be empty"):
            DocumentBatch("", "file.xml")

    def test_status_follows_lifecycle(self) -> None:
        batch = DocumentBatch("b1", "file.xml")
        assert batch.status == BatchStatus.RECEIVED
        batch.set_raw_payload("<Docs/>")
        assert batch.status == BatchStatus.DOWNLOADED
        batch.set_internal_reference("/archive/b1.xml")
        assert batch.status == BatchStatus.STORED
        batch.apply_xml_validation(ValidationOutcome.success())
        assert batch.status == BatchStatus.XML_VALID

    def test_xml_rejected_only_after_failed_check(self) -> None:
        batch = DocumentBatch("b1", "file.xml")
        assert not batch.xml_rejected
        assert batch.xml_validation_errors == []
        batch.apply_xml_validation(ValidationOutcome.failure("nope"))
        assert batch.xml_rejected
        assert not batch.is_xml_valid
        assert batch.xml_validation_errors == ["nope"]
        assert batch.status == BatchStatus.XML_INVALID

    def test_documents_are_read_only_view(self) -> None:
        batch = DocumentBatch("b1", "file.xml")
        batch.add_document(Document("1", "dGVzdA=="))
        assert isinstance(batch.documents, tuple)
        assert len(batch.documents) == 1

    def test_valid_and_invalid_partition(self) -> None:
        batch = DocumentBatch("b1", "file.xml")
        good, bad = Document("1", "dGVzdA=="), Document("2", "dGVzdA==")
        good.apply_validation(ValidationOutcome.success())
        bad.apply_validation(ValidationOutcome.failure("x"))
        batch.add_document(good)
        batch.add_document(bad)
        assert batch.valid_documents() == [good]
        assert batch.invalid_documents() == [bad]

    def test_mark_processed_cascades(self) -> None:
        batch = DocumentBatch("b1", "file.xml")
        batch.add_document(Document("1", "dGVzdA=="))
        batch.mark_processed()
        assert batch.status == BatchStatus.PROCESSED
        assert batch.processed_at is not None
        assert batch.documents[0].status == DocumentStatus.PROCESSED


class TestBlobReference:
    def test_splits_container_and_blob(self) -> None:
        ref = BlobReference.from_url("https://acct.blob.test/incoming/2024/b1.xml")
        assert ref.container_name == "incoming"
        assert ref.blob_name == "2024/b1.xml"

    def test_single_segment_is_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid blob URL format"):
            BlobReference.from_url("https://acct.blob.test/incoming")

    def test_relative_url_is_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid blob URL format"):
            BlobReference.from_url("incoming/b1.xml")

    def test_empty_blob_name_is_invalid(self) -> None:
        with pytest.raises(ValueError, match="Blob name cannot be empty"):
            BlobReference.from_url("https://acct.blob.test/incoming/")
