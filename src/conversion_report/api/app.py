"""FastAPI trigger endpoint for the report job.

The scheduler calls GET /api/sfdcquery with every parameter in the query
string (Authorization, sfdcEnvironment, requestType) so a plain cron HTTP GET
can drive it.
"""

import hmac
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conversion_report import __version__
from conversion_report.config import PRODUCTION, UAT, JobConfig, is_uat
from conversion_report.connectors import BaseConnector
from conversion_report.errors import ReportJobError, UnauthorizedRequestError, UnsupportedReportTypeError
from conversion_report.logutil import new_request_id, sanitize_params, sanitize_url
from conversion_report.notify import BaseNotifier
from conversion_report.pipeline import make_connector, make_notifier, make_store, run_incremental_report, send_error_alert
from conversion_report.reports import ReportRegistry
from conversion_report.store import BaseWatermarkStore

logger = logging.getLogger(__name__)

ConnectorFactory = Callable[[str], BaseConnector]


def create_app(
    config: JobConfig,
    *,
    connector_factory: Optional[ConnectorFactory] = None,
    store: Optional[BaseWatermarkStore] = None,
    notifier: Optional[BaseNotifier] = None,
) -> FastAPI:
    """
    Build the app around one set of collaborators shared by every request.
    Connectors are created on first use per environment and then reused.
    """
    store = store or make_store(config)
    notifier = notifier or make_notifier(config)
    factory = connector_factory or (lambda env: make_connector(config, env))
    connectors: dict[str, BaseConnector] = {}

    def get_connector(env: str) -> BaseConnector:
        if env not in connectors:
            connectors[env] = factory(env)
        return connectors[env]

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for connector in connectors.values():
            connector.close()
        store.close()
        notifier.close()

    app = FastAPI(
        title="Conversion Report API",
        description="Incremental CRM conversion report job",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {
            "status": "healthy",
            "service": "conversion-report",
            "version": __version__,
            "reports": ReportRegistry.available_reports(),
        }

    @app.get("/api/sfdcquery", tags=["Reports"])
    def sfdcquery(
        request: Request,
        authorization: Optional[str] = Query(default=None, alias="Authorization"),
        sfdc_environment: Optional[str] = Query(default=None, alias="sfdcEnvironment"),
        request_type: Optional[str] = Query(default=None, alias="requestType"),
    ):
        """Run one incremental report and answer with a single JSON body."""
        request_id = new_request_id()
        request_url = sanitize_url(str(request.url)) or ""
        logger.info("[%s] Request payload: %s", request_id, sanitize_params(dict(request.query_params)))
        env = UAT if is_uat(sfdc_environment) else PRODUCTION

        try:
            _authorize(config, env, authorization, request_url)
            report = ReportRegistry.get(request_type)
            outcome = run_incremental_report(
                config,
                report=report,
                connector=get_connector(env),
                store=store,
                notifier=notifier,
                environment=env,
                request_id=request_id,
            )
        except (UnauthorizedRequestError, UnsupportedReportTypeError) as e:
            logger.warning("[%s] Rejected %s: %s", request_id, request_url, e.message)
            return JSONResponse(status_code=e.http_status, content=e.body)
        except ReportJobError as e:
            logger.error("[%s] Exception caught in %s: %s %s", request_id, request_url, e.message, e.body)
            send_error_alert(config, notifier, e, request_id=request_id, source=request_url)
            return JSONResponse(status_code=e.http_status, content=e.body)
        except Exception as e:
            logger.exception("[%s] Unexpected error in %s", request_id, request_url)
            send_error_alert(config, notifier, e, request_id=request_id, source=request_url)
            return JSONResponse(status_code=500, content={"error": str(e)})

        return outcome.to_response()

    @app.options("/api/sfdcquery", include_in_schema=False)
    def sfdcquery_options() -> Response:
        """Bare OPTIONS; CORS preflights are answered by the middleware."""
        return Response(status_code=204)

    return app


def _authorize(config: JobConfig, env: str, supplied: Optional[str], request_url: str) -> None:
    """Raise UnauthorizedRequestError unless supplied matches the environment's key."""
    try:
        expected = config.environment(env).api_key
    except ValueError:
        expected = ""
    if not supplied or not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
        raise UnauthorizedRequestError(f"Authorization failed for sfdcquery endpoint {request_url}")
