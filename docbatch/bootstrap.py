from docbatch.collaborators.base import BaseContentStore, BaseErrorReporter, BasePrintClient
from docbatch.collaborators.factory import CollaboratorFactory
from docbatch.config.settings import Settings
from docbatch.dispatch.dispatcher import Dispatcher, HandlerRegistry
from docbatch.pipeline.commands import (
    DownloadAndValidateXml,
    ProcessDocumentBatch,
    ProcessDocuments,
    ReportInvalidResults,
    SubmitValidDocuments,
)
from docbatch.pipeline.events import BatchCompleted, LogBatchOutcome
from docbatch.pipeline.orchestrator import BatchOrchestrator
from docbatch.pipeline.queries import (
    DetectDocumentSchema,
    DetectDocumentSchemaHandler,
    ValidateAgainstSchema,
    ValidateAgainstSchemaHandler,
)
from docbatch.pipeline.stages import (
    DownloadAndValidateXmlHandler,
    ProcessDocumentsHandler,
    ReportInvalidResultsHandler,
    SubmitValidDocumentsHandler,
)

REQUIRED_COMMANDS = (
    ProcessDocumentBatch,
    DownloadAndValidateXml,
    ProcessDocuments,
    ReportInvalidResults,
    SubmitValidDocuments,
)


def build_dispatcher(
    settings: Settings,
    *,
    content_store: BaseContentStore | None = None,
    error_reporter: BaseErrorReporter | None = None,
    print_client: BasePrintClient | None = None,
) -> Dispatcher:
    """Wire every handler into a Dispatcher. Collaborators default to the factory's."""
    content_store = content_store or CollaboratorFactory.create_content_store(settings)
    error_reporter = error_reporter or CollaboratorFactory.create_error_reporter(settings)
    print_client = print_client or CollaboratorFactory.create_print_client(settings)

    orchestrator = BatchOrchestrator()
    registry = (
        HandlerRegistry()
        .register_command(ProcessDocumentBatch, orchestrator)
        .register_command(DownloadAndValidateXml, DownloadAndValidateXmlHandler(content_store))
        .register_command(
            ProcessDocuments, ProcessDocumentsHandler(max_workers=settings.document_workers)
        )
        .register_command(ReportInvalidResults, ReportInvalidResultsHandler(error_reporter))
        .register_command(SubmitValidDocuments, SubmitValidDocumentsHandler(print_client))
        .register_query(DetectDocumentSchema, DetectDocumentSchemaHandler())
        .register_query(ValidateAgainstSchema, ValidateAgainstSchemaHandler())
        .subscribe(BatchCompleted, LogBatchOutcome())
    )
    registry.require(REQUIRED_COMMANDS)

    dispatcher = registry.build(event_workers=settings.event_handler_workers)
    orchestrator.bind(dispatcher)
    return dispatcher
