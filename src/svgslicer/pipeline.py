"""
Generation pipeline: input geometry -> job -> toolpath -> G-code.

Chains: build job (extract + transform) -> assemble toolpath -> emit G-code

The machine regime is chosen once, in ``build_job``, from the source type
and the plotter-mode flag:

- raster + plotter   -> PlotterJob of hatch segments
- vector + plotter   -> PlotterJob of outer and hole outline segments
- raster + standard  -> RasterContourJob of traced wall segments
- vector + standard  -> VectorInfillJob of shapes with optional infill

Every fatal condition is raised before any instruction text exists, so a
failed run never leaves a partial stream behind. Nothing is retried: the
outcome is fully determined by the input and the settings.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from svgslicer.core.config import JobSettings, ModelSettings, PrinterSettings
from svgslicer.core.exceptions import InputError, SlicerError
from svgslicer.core.geometry import RasterBuffer, shapes_bounds
from svgslicer.core.loaders import Source
from svgslicer.core.logging import generation_context, get_logger
from svgslicer.postprocessor.gcode import GCodePostProcessor, GCodeProgram
from svgslicer.slicing.contour import trace_contours
from svgslicer.slicing.hatching import generate_hatching, hatch_passes
from svgslicer.slicing.jobs import (
    Job,
    PlotterJob,
    RasterContourJob,
    VectorInfillJob,
    standard_layer_count,
)
from svgslicer.slicing.scanline import fill_spacing
from svgslicer.slicing.toolpath import Toolpath, ToolpathAssembler
from svgslicer.slicing.transform import BedTransform
from svgslicer.slicing.vector import check_shapes, shapes_to_segments

logger = get_logger(__name__)


def build_job(source: Source, printer: PrinterSettings, model: ModelSettings) -> Job:
    """
    Extract drawable geometry from ``source`` and pick the job variant.

    Args:
        source: A RasterBuffer, or a sequence of Shapes in source units
        printer: Printer settings
        model: Model settings

    Returns:
        The job for this run, with geometry already in bed space where
        the variant stores segments

    Raises:
        InputError: If vector input holds no shape with outline points
    """
    if isinstance(source, RasterBuffer):
        transform = BedTransform.for_source(source.width, source.height, printer, model)
        if model.plotter_mode:
            segments = generate_hatching(source, hatch_passes(model.hatch_style))
            return PlotterJob(segments=tuple(transform.segments_to_bed(segments)))
        segments = trace_contours(source)
        return RasterContourJob(
            segments=tuple(transform.segments_to_bed(segments)),
            layer_count=standard_layer_count(model.target_height, printer.layer_height),
        )

    shapes = tuple(shape for shape in source if shape.outer)
    if not shapes:
        raise InputError("No drawable geometry found in vector input")

    check_shapes(shapes)
    transform = BedTransform.for_bounds(shapes_bounds(shapes), printer, model)
    if model.plotter_mode:
        segments = shapes_to_segments(shapes)
        return PlotterJob(segments=tuple(transform.segments_to_bed(segments)))

    spacing = None
    if model.generate_infill:
        spacing = fill_spacing(printer.nozzle_diameter, model.fill_density)
    return VectorInfillJob(
        shapes=shapes,
        transform=transform,
        layer_count=standard_layer_count(model.target_height, printer.layer_height),
        infill_spacing=spacing,
    )


def generate_gcode(
    source: Source,
    printer: PrinterSettings,
    model: ModelSettings,
    prefix: str = "",
) -> str:
    """
    Generate the complete instruction stream for ``source``.

    A pure function of its arguments: identical inputs give byte-identical
    output.

    Raises:
        InputError: If vector input holds no shape with outline points
    """
    job = build_job(source, printer, model)
    toolpath = ToolpathAssembler(printer).assemble(job)
    return GCodePostProcessor(printer, prefix).generate(toolpath)


@dataclass
class StepResult:
    """Result of a single pipeline step."""

    name: str
    success: bool
    data: Any = None
    error: Optional[SlicerError] = None
    duration_s: float = 0.0


@dataclass
class GenerationResult:
    """Result of a complete generation run."""

    success: bool
    job: Optional[Job] = None
    toolpath: Optional[Toolpath] = None
    program: Optional[GCodeProgram] = None
    steps: List[StepResult] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)
    step_completed: str = ""  # Last step that completed successfully

    @property
    def gcode(self) -> str:
        return self.program.text if self.program else ""

    @property
    def error(self) -> Optional[SlicerError]:
        for step in self.steps:
            if step.error is not None:
                return step.error
        return None


# Type alias for progress callback: (step_name, fraction 0.0-1.0)
ProgressCallback = Callable[[str, float], None]


def _noop_callback(step: str, pct: float) -> None:
    pass


class GenerationPipeline:
    """Runs the generation steps with per-step timing.

    Usage:
        pipeline = GenerationPipeline(settings)
        result = pipeline.execute(load_source("logo.svg"))
        if result.success:
            Path("logo.gcode").write_text(result.gcode)
    """

    def __init__(
        self,
        settings: JobSettings,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.settings = settings
        self._progress = progress_callback or _noop_callback

    def execute(self, source: Source) -> GenerationResult:
        """Build the job, assemble the toolpath and emit G-code.

        A failing step ends the run; its error is kept on the step result.
        """
        printer = self.settings.printer
        model = self.settings.model
        result = GenerationResult(success=False)

        with generation_context(
            source="raster" if isinstance(source, RasterBuffer) else "vector",
            plotter_mode=model.plotter_mode,
        ):
            step = self._run_step("build_job", lambda: build_job(source, printer, model))
            if not self._record(result, step):
                return result
            result.job = step.data

            step = self._run_step(
                "assemble", lambda: ToolpathAssembler(printer).assemble(result.job)
            )
            if not self._record(result, step):
                return result
            result.toolpath = step.data

            step = self._run_step(
                "emit",
                lambda: GCodePostProcessor(printer, self.settings.prefix).emit(result.toolpath),
            )
            if not self._record(result, step):
                return result
            result.program = step.data

        result.success = True
        return result

    @staticmethod
    def _record(result: GenerationResult, step: StepResult) -> bool:
        result.steps.append(step)
        if step.success:
            result.step_completed = step.name
            result.timings[step.name] = step.duration_s
        return step.success

    def _run_step(self, name: str, fn: Callable[[], Any]) -> StepResult:
        """Execute a single pipeline step with timing and error handling."""
        self._progress(name, 0.0)
        t0 = time.perf_counter()
        try:
            data = fn()
        except SlicerError as e:
            duration = time.perf_counter() - t0
            logger.error(
                "pipeline_step_failed", step=name, duration_s=round(duration, 3), error=str(e)
            )
            return StepResult(name=name, success=False, error=e, duration_s=duration)
        duration = time.perf_counter() - t0
        self._progress(name, 1.0)
        logger.info("pipeline_step_complete", step=name, duration_s=round(duration, 3))
        return StepResult(name=name, success=True, data=data, duration_s=duration)


def run_generation(source: Source, settings: JobSettings) -> GenerationResult:
    """Convenience wrapper around :class:`GenerationPipeline`."""
    return GenerationPipeline(settings).execute(source)
