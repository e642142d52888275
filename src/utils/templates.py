import logging
from pathlib import Path
import re
from typing import Dict, List, Optional, Set

logger = logging.getLogger(__name__)

# Placeholders each screen text must provide
REQUIRED_TEMPLATE_VARS: Dict[str, List[str]] = {
    "title": [],
    "moves": ["move_count"],
    "disk_count": ["disk_count"],
    "solved": ["move_count", "optimal_moves"],
    "play_again": [],
    "controls": [],
    "board": ["board", "move_count"],
}


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    def __init__(self, message: str, template_name: Optional[str] = None):
        self.template_name = template_name
        self.message = message
        if template_name:
            super().__init__(f"Template error in '{template_name}': {message}")
        else:
            super().__init__(f"Template error: {message}")


class TemplateManager:
    """Loads the game's text snippets and fills in their placeholders."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        self.templates: Dict[str, str] = dict(templates or {})

    def load_templates(self, template_dir: str) -> Dict[str, str]:
        """Load every ``*.txt`` file of a directory, keyed by file stem.

        Trailing newlines are stripped so single-line texts render cleanly.

        Raises:
            TemplateError: If directory doesn't exist or templates can't be loaded
        """
        template_path = Path(template_dir)

        if not template_path.exists():
            raise TemplateError(f"Template directory '{template_dir}' does not exist")

        if not template_path.is_dir():
            raise TemplateError(f"Template path '{template_dir}' is not a directory")

        template_files = sorted(template_path.glob("*.txt"))
        if not template_files:
            raise TemplateError(f"No template files found in '{template_dir}'")

        for template_file in template_files:
            try:
                self.templates[template_file.stem] = template_file.read_text(encoding="utf-8").rstrip("\n")
                logger.debug(f"Loaded template '{template_file.stem}' from {template_file}")
            except OSError as e:
                raise TemplateError(
                    f"Failed to load template from '{template_file}': {e}",
                    template_file.stem
                ) from e

        logger.info(f"Loaded {len(template_files)} templates from {template_dir}")
        return dict(self.templates)

    def render(self, name: str, **kwargs) -> str:
        """Format the named template.

        Raises:
            TemplateError: If the template is unknown or a variable is missing
        """
        if name not in self.templates:
            raise TemplateError("Unknown template", name)
        try:
            return self.format_template(self.templates[name], **kwargs)
        except TemplateError as e:
            raise TemplateError(e.message, name) from e

    def format_template(self, template: str, **kwargs) -> str:
        try:
            formatted = template.format(**kwargs)
            logger.debug(f"Formatted template with {len(kwargs)} variables")
            return formatted

        except KeyError as e:
            missing_var = str(e).strip("'\"")
            raise TemplateError(f"Missing required variable: {missing_var}") from e

        except (IndexError, ValueError) as e:
            raise TemplateError(f"Template formatting failed: {e}") from e

    def validate_templates(self, required: Optional[Dict[str, List[str]]] = None) -> List[str]:
        """Check that every required template exists and uses its variables.

        Returns:
            List of validation error messages (empty if valid)
        """
        required = REQUIRED_TEMPLATE_VARS if required is None else required
        errors = []

        for name, variables in required.items():
            if name not in self.templates:
                errors.append(f"Missing template: {name}")
                continue
            errors.extend(f"{name}: {error}" for error in self.validate_template_vars(self.templates[name], variables))

        logger.debug(f"Template validation found {len(errors)} errors")
        return errors

    def validate_template_vars(self, template: str, required_vars: List[str]) -> List[str]:
        errors = []

        missing_vars = set(required_vars) - self._extract_template_vars(template)
        for var in sorted(missing_vars):
            errors.append(f"Missing required variable: {var}")

        errors.extend(self._validate_template_syntax(template))
        return errors

    def _extract_template_vars(self, template: str) -> Set[str]:
        # Escaped braces are literal text
        unescaped = template.replace("{{", "").replace("}}", "")
        variables = set()
        for match in re.findall(r"\{([^}]+)\}", unescaped):
            # Split on ':' to handle format specifications
            var_name = match.split(":")[0].strip()
            if var_name:
                variables.add(var_name)

        return variables

    def _validate_template_syntax(self, template: str) -> List[str]:
        errors = []
        unescaped = template.replace("{{", "").replace("}}", "")

        open_braces = unescaped.count("{")
        close_braces = unescaped.count("}")
        if open_braces != close_braces:
            errors.append(f"Unmatched braces: {open_braces} open, {close_braces} close")

        if "{}" in unescaped:
            errors.append("Empty variable placeholder found: {}")

        return errors


def load_templates(template_dir: str) -> TemplateManager:
    """Build a TemplateManager from a directory (convenience function).

    Raises:
        TemplateError: If templates cannot be loaded

    Example:
        >>> templates = load_templates("templates/tower_of_hanoi/")
        >>> templates.render("moves", move_count=3)
        'Moves: 3'
    """
    manager = TemplateManager()
    manager.load_templates(template_dir)
    return manager
