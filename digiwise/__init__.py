"""
DigiWise Digital Wellness Assessment

This package holds the backend logic of the DigiWise self-assessment:
examinees answer a questionnaire and receive an overall score, a breakdown
per category and a risk level; administrators read aggregated figures.

The package features:
1. A pure scoring engine (``digiwise.scoring``)
2. The immutable question catalog (``digiwise.domain.questions``)
3. Assessment sessions with one stored result each (``digiwise.assessments``)
4. Dashboard aggregation over stored results (``digiwise.metrics``)
"""

from digiwise.common.logger import configure_logger

__version__ = "1.0.0"


def create_assessment_service(catalog, config=None, result_repository=None, session_repository=None):
    """
    Create an assessment service wired to the application configuration.

    Applies the configured logging settings, then builds the service with
    in-memory repositories unless others are supplied. Question dictionaries
    without a ``max_value`` get the configured ``assessment.default_max_value``.

    Args:
        catalog: The QuestionCatalog sessions are scored against, or the
            question dictionaries to build it from
        config: Application configuration; the global one when omitted
        result_repository: Optional result repository
        session_repository: Optional session repository

    Returns:
        A ready AssessmentService
    """
    from digiwise.common.config import get_config
    from digiwise.assessments.service import AssessmentService
    from digiwise.domain.questions import QuestionCatalog

    config = config or get_config()
    configure_logger(
        level=config.logging.level,
        use_json=config.logging.json_output,
        log_file=config.logging.file_path,
    )

    if not isinstance(catalog, QuestionCatalog):
        catalog = QuestionCatalog.from_dicts(catalog, config.assessment.default_max_value)

    return AssessmentService(
        catalog,
        session_repository=session_repository,
        result_repository=result_repository,
        config=config,
    )
