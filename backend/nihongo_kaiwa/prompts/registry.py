"""Prompt registry for loading and rendering persona prompts."""
import json
import logging
import time
from pathlib import Path
from typing import Dict, Any, Optional
from jinja2 import Environment, FileSystemLoader, TemplateNotFound

logger = logging.getLogger(__name__)

PERSONA_TEMPLATE = "personas/kaiwa_partner_{version}.j2"


class PromptRegistry:
    """Centralized prompt management with template support and caching."""

    def __init__(self, prompts_dir: Optional[Path] = None, ttl_seconds: int = 3600):
        """Initialize prompt registry.

        Args:
            prompts_dir: Path to prompts directory. Defaults to the directory of this file.
            ttl_seconds: How long a rendered prompt stays cached
        """
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent

        self.prompts_dir = Path(prompts_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.prompts_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        self._cache: Dict[str, str] = {}
        self._cache_times: Dict[str, float] = {}
        self.ttl_seconds = ttl_seconds

    def get_prompt(
        self,
        prompt_path: str,
        variables: Optional[Dict[str, Any]] = None
    ) -> str:
        """Get a prompt with optional variable substitution.

        Args:
            prompt_path: Path relative to prompts dir (e.g., "personas/kaiwa_partner_v1.j2")
            variables: Dictionary of variables for template rendering

        Returns:
            Rendered prompt string, stripped of surrounding whitespace

        Raises:
            FileNotFoundError: If prompt file doesn't exist
        """
        variables = variables or {}
        cache_key = f"{prompt_path}:{json.dumps(variables, sort_keys=True, default=str)}"

        if cache_key in self._cache:
            if time.time() - self._cache_times.get(cache_key, 0) < self.ttl_seconds:
                return self._cache[cache_key]

        try:
            template = self.env.get_template(prompt_path)
        except TemplateNotFound:
            logger.error(f"Prompt template not found: {prompt_path}")
            raise FileNotFoundError(f"Prompt template not found: {prompt_path}")

        try:
            rendered = template.render(**variables).strip()
        except Exception as e:
            logger.error(f"Error rendering prompt {prompt_path}: {e}")
            raise

        self._cache[cache_key] = rendered
        self._cache_times[cache_key] = time.time()
        return rendered

    def get_persona_prompt(
        self,
        version: str = "v1",
        persona_name: str = "Sakura",
        learner_language: str = "Indonesian",
    ) -> str:
        """Render the Japanese conversation partner persona.

        Args:
            version: Template version suffix (e.g., "v1")
            persona_name: Name the assistant introduces itself with
            learner_language: The learner's native language, which replies must avoid
        """
        return self.get_prompt(
            PERSONA_TEMPLATE.format(version=version),
            variables={"persona_name": persona_name, "learner_language": learner_language},
        )


# Global registry instance
prompt_registry = PromptRegistry()
