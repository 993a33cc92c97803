from __future__ import annotations

import time
from typing import Optional

from ringfit.domain.ports.Field_classifier import Field_classifier
from ringfit.domain.ports.Image_fetcher import Image_fetcher
from ringfit.domain.ports.Metrics_recorder import Metrics_recorder
from ringfit.domain.ports.Page_resolver import Page_resolver
from ringfit.domain.ports.Pipeline_interface import Pipeline_interface
from ringfit.domain.schemas.anchor import FieldRole
from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.input_data import ProcessingOptions, RecordRequest, RequestContext
from ringfit.domain.schemas.result_data import ErrorEntry, ImageResult, MetaInfo, RecordedValue, ResultData
from ringfit.lib.errors import CollaboratorError, NothingRecordedError
from ringfit.lib.logger import get_logger
from ringfit.lib.settings import Settings, load_settings

from .field_classifier_service import FieldClassifierService
from .field_normalizer_service import FieldNormalizerService
from .image_fetcher_service import ImageFetcherService
from .ocr_service import OCRService
from .page_resolver_service import PageResolverService
from .recorder_service import PixelaRecorder


# order in which values are written for one screenshot
RECORDED_ROLES = (FieldRole.ACTIVITY_TIME, FieldRole.CALORIE, FieldRole.DISTANCE)


class PipelineService(Pipeline_interface):
    """Post URL -> screenshots -> OCR tokens -> fields -> Pixela.

    Images are processed one after another. A collaborator failure aborts the
    image it happened on, and so does a screenshot that yields nothing to
    record (outside dry runs); unless ``continue_on_error`` is set it is re-raised
    and the remaining images are not touched.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        resolver: Optional[Page_resolver] = None,
        fetcher: Optional[Image_fetcher] = None,
        ocr: Optional[OCRService] = None,
        classifier: Optional[Field_classifier] = None,
        normalizer: Optional[FieldNormalizerService] = None,
        recorder: Optional[Metrics_recorder] = None,
    ) -> None:
        self.logger = get_logger("pipeline")
        self.settings = settings or load_settings()
        timeout = self.settings.http_timeout
        self.resolver = resolver or PageResolverService(timeout=timeout)
        self.fetcher = fetcher or ImageFetcherService(timeout=timeout)
        self.ocr = ocr or OCRService(which=self.settings.ocr_provider, min_conf=self.settings.ocr_min_conf)
        self.classifier = classifier or FieldClassifierService(self.settings.anchors)
        self.normalizer = normalizer or FieldNormalizerService()
        self.recorder = recorder or PixelaRecorder(self.settings.pixela, timeout=timeout)

    def run(
        self,
        request: RecordRequest,
        options: Optional[ProcessingOptions] = None,
        context: Optional[RequestContext] = None,
    ) -> ResultData:
        options = options or ProcessingOptions(continue_on_error=self.settings.continue_on_error)
        context = context or RequestContext()
        t0 = time.perf_counter()
        url = str(request.url)
        result = ResultData(meta=MetaInfo(request_id=context.request_id), url=url)

        self.logger.info("posted url: %s (request_id=%s)", url, context.request_id)

        # 1) page -> image urls
        image_urls = self.resolver.resolve(url)
        result.meta.timings_ms["resolve"] = int((time.perf_counter() - t0) * 1000)
        self.logger.info("resolve: %d image url(s)", len(image_urls))

        # 2) each image in turn
        for idx, image_url in enumerate(image_urls, start=1):
            t1 = time.perf_counter()
            image_result = ImageResult(image_url=image_url)
            result.images.append(image_result)
            try:
                self._process_image(image_result, options)
            except (CollaboratorError, NothingRecordedError) as e:
                image_result.failed = True
                image_result.errors.append(ErrorEntry(code=e.code, message=str(e), source=image_url))
                self.logger.error("image[%d] failed: %s", idx, e)
                if not options.continue_on_error:
                    raise
            finally:
                result.meta.timings_ms[f"image[{idx}]"] = int((time.perf_counter() - t1) * 1000)

        total_ms = int((time.perf_counter() - t0) * 1000)
        result.meta.timings_ms["total"] = total_ms
        self.logger.info("done: images=%d ok=%s total=%d ms", len(result.images), result.ok, total_ms)
        return result

    def extract(self, image: ImageData) -> ImageResult:
        """OCR one screenshot and return its matches and canonical fields, without recording."""
        ocr = self.ocr.run(image)
        self.logger.info("ocr: tokens=%d words=%d", len(ocr.tokens), len(ocr.words()))

        matches = self.classifier.classify(ocr.tokens, self.settings.anchors)
        fields, errors = self.normalizer.normalize(matches)
        return ImageResult(image_url=image.url or "", matches=matches, fields=fields, errors=errors)

    def _process_image(self, image_result: ImageResult, options: ProcessingOptions) -> None:
        image = self.fetcher.fetch(image_result.image_url)
        extracted = self.extract(image)
        image_result.matches = extracted.matches
        image_result.fields = extracted.fields
        image_result.errors.extend(extracted.errors)
        fields = extracted.fields

        if options.dry_run:
            self.logger.info("dry run: skipping record")
            return
        if fields.date is None:
            raise NothingRecordedError(f"no usable date on {image_result.image_url}; nothing recorded")

        for role in RECORDED_ROLES:
            value = fields.value(role)
            if value is None:
                self.logger.warning("skip %s: no canonical value", role.value)
                continue
            graph_id = self.settings.pixela.graph_for(role)
            # a failure here stops the remaining fields of this image
            self.recorder.record(graph_id, fields.date, value)
            image_result.recorded.append(RecordedValue(graph_id=graph_id, date=fields.date, value=value))

        if not image_result.recorded:
            raise NothingRecordedError(f"no usable value on {image_result.image_url}; nothing recorded")
