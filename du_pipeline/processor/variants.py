from du_pipeline.processor.models import PipelineConfig
from du_pipeline.processor.prompt_loader import CLASSIFICATION_PROMPTS_KEY, PromptLoader
from du_pipeline.stages.models import DefaultVariant, GenerativeVariant, StageVariant


class StageSelector:
    """Chooses the default or generative variant for the classify and extract stages."""

    def __init__(
        self,
        config: PipelineConfig,
        prompt_loader: PromptLoader,
        *,
        classifier_name: str = "ml-classification",
        generative_classifier_name: str = "generative_classifier",
        generative_extractor_name: str = "generative_extractor",
    ) -> None:
        self._config = config
        self._prompt_loader = prompt_loader
        self._classifier_name = classifier_name
        self._generative_classifier_name = generative_classifier_name
        self._generative_extractor_name = generative_extractor_name

    def classifier(self) -> StageVariant:
        if self._config.generative_classification:
            return GenerativeVariant(
                name=self._generative_classifier_name,
                prompts=self._prompt_loader.load(CLASSIFICATION_PROMPTS_KEY),
            )
        return DefaultVariant(name=self._classifier_name)

    def extractor(self, document_type_id: str) -> StageVariant:
        if self._config.generative_extraction:
            return GenerativeVariant(
                name=self._generative_extractor_name,
                prompts=self._prompt_loader.load(document_type_id),
            )
        return DefaultVariant(name=document_type_id)
