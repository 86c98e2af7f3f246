"""Application state — current dataset and active guidelines.

A state is never mutated in place: loading a dataset or toggling a guideline
returns a new state. A failed load raises before anything is replaced, so
the caller still holds the previous state.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from netguide.config import Config, SampleConfig
from netguide.encoding import parse_guidelines
from netguide.ingest import ingest, ingest_file
from netguide.models import Dataset, DatasetPreview, Guideline, Variant
from netguide.render import VariantView, render_views
from netguide.sample import SAMPLE_NAME, generate_sample

logger = logging.getLogger(__name__)


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    dataset: Dataset | None = None
    source_name: str | None = None
    guidelines: frozenset[Guideline] = Field(default_factory=lambda: frozenset(Guideline))

    @classmethod
    def initial(cls, config: Config) -> "AppState":
        return cls(guidelines=parse_guidelines(config.guidelines))

    # --- Replace-on-ingest ---

    def load(self, raw_text: str, fmt: str, source_name: str) -> "AppState":
        dataset = ingest(raw_text, fmt)
        return self._replace_dataset(dataset, source_name)

    def load_file(self, path: Path) -> "AppState":
        dataset = ingest_file(path)
        return self._replace_dataset(dataset, path.name)

    def load_sample(self, seed: int | None = None, config: SampleConfig | None = None) -> "AppState":
        dataset = generate_sample(seed=seed, config=config)
        return self._replace_dataset(dataset, SAMPLE_NAME)

    def _replace_dataset(self, dataset: Dataset, source_name: str) -> "AppState":
        logger.info("Dataset replaced by %s", source_name)
        return self.model_copy(update={"dataset": dataset, "source_name": source_name})

    # --- Guidelines ---

    def with_guideline(self, guideline: Guideline, enabled: bool) -> "AppState":
        if enabled:
            active = self.guidelines | {guideline}
        else:
            active = self.guidelines - {guideline}
        return self.model_copy(update={"guidelines": frozenset(active)})

    # --- Derived views ---

    def preview(self, limit: int = 5) -> DatasetPreview | None:
        if self.dataset is None:
            return None
        return DatasetPreview(
            node_count=len(self.dataset.nodes),
            edge_count=len(self.dataset.links),
            edges=[(e.source, e.target) for e in self.dataset.links[:limit]],
        )

    @property
    def dataset_info(self) -> str | None:
        if self.dataset is None:
            return None
        return (
            f"Dataset: {self.source_name} "
            f"({len(self.dataset.nodes)} nodes, {len(self.dataset.links)} edges)"
        )

    def render(self, config: Config, seed: int | None = None) -> dict[Variant, VariantView] | None:
        """Build fresh plain/annotated views, or None when nothing is loaded."""
        if self.dataset is None:
            return None
        return render_views(self.dataset, self.guidelines, config, seed=seed)
