"""JSON persistence for pydantic models."""

import logging
import shutil
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from midilink.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PydanticPersistence:
    """
    Reads and writes pydantic models as JSON files.

    Saving copies the previous file to ``<name>.bak`` first and writes through
    ``<name>.tmp`` followed by a rename, so an interrupted save leaves either
    the old or the new file in place.
    """

    @staticmethod
    def load_json(path: Path, model_type: type[T]) -> T:
        """
        Load and validate a model.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If a value fails validation
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigFileInvalidError(str(path), str(e)) from e

        if not text.strip():
            raise ConfigFileInvalidError(str(path), "file is empty")

        try:
            model = model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Could not load {model_type.__name__} from {path}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def load_json_or_default(path: Path, model_type: type[T]) -> T:
        """
        Load a model, or build a default one if the file doesn't exist.

        The default is not written to disk. A file that exists but is broken
        still raises, so a typo never silently resets the user's settings.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"No file at {path}, using default {model_type.__name__}")
            return model_type()

    @staticmethod
    def save_json(data: BaseModel, path: Path, backup: bool = True) -> None:
        """
        Save a model, creating parent directories as needed.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if backup and path.exists():
                shutil.copy2(path, path.with_suffix(path.suffix + ".bak"))

            temp_path.write_text(data.model_dump_json(indent=2), encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Could not save {type(data).__name__} to {path}: {e}")
            raise ConfigurationError(
                user_message=f"Failed to save configuration to {path}",
                technical_message=f"Writing {path} failed: {e}",
                recovery_hint="Check file permissions and free disk space",
            ) from e
        finally:
            temp_path.unlink(missing_ok=True)

        logger.debug(f"Saved {type(data).__name__} to {path}")
