from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from ringfit.domain.schemas.input_data import ProcessingOptions, RecordRequest
from ringfit.lib.errors import InputError, RingfitError
from ringfit.lib.logger import get_logger
from ringfit.lib.settings import as_bool, load_settings
from ringfit.service.pipeline_service import PipelineService

from dotenv import load_dotenv
load_dotenv()


def build_request(url: str) -> RecordRequest:
    try:
        return RecordRequest(url=url)
    except ValidationError as e:
        raise InputError(f"invalid url {url!r}: {e.errors()[0]['msg']}") from e


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    serve = as_bool(os.getenv("SERVE", "0"))
    if serve and not argv:
        # Run HTTP server; host/port from env
        import uvicorn
        host = os.getenv("DOMAIN", "0.0.0.0")
        port = int(os.getenv("PORT", "8080"))
        uvicorn.run("ringfit.transport.http.server:create_app", factory=True, host=host, port=port, reload=False)
        return 0

    parser = argparse.ArgumentParser(
        prog="ringfit",
        description="Read a Ring Fit summary screenshot from a post and record it to Pixela. "
                    "Set SERVE=1 to start the HTTP server instead.",
    )
    parser.add_argument("url", help="URL of the post with the screenshot")
    parser.add_argument("--dry-run", action="store_true", help="extract only, do not record")
    parser.add_argument("--continue-on-error", action="store_true", help="keep going after an image fails")
    args = parser.parse_args(argv)

    logger = get_logger("cli")
    try:
        settings = load_settings()
        options = ProcessingOptions(
            dry_run=args.dry_run,
            continue_on_error=args.continue_on_error or settings.continue_on_error,
        )
        request = build_request(args.url)
        result = PipelineService(settings).run(request, options)
    except RingfitError as e:
        logger.error("Record failed: %s", e)
        return 1

    print(result.model_dump_json(indent=2), flush=True)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
