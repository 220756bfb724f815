"""Export ProfileSettings field metadata to docs/env-vars.json."""

import json
import sys
from pathlib import Path
from typing import Type

from pydantic_core import PydanticUndefined
from pydantic_settings import BaseSettings

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "azctx"))

from infrastructure.settings import ProfileSettings  # noqa: E402
from infrastructure.version import __version__  # noqa: E402


def get_model_metadata(settings_class: Type[BaseSettings]):
    prefix = settings_class.model_config.get("env_prefix", "")
    properties = []

    for name, field in settings_class.model_fields.items():
        type_name = getattr(field.annotation, "__name__", str(field.annotation))
        is_required = field.is_required()

        if field.default_factory is not None:
            default = field.default_factory()
        else:
            default = None if field.default is PydanticUndefined else field.default

        if default is None or isinstance(default, (bool, int)):
            display_default = default
        else:
            display_default = str(default)

        properties.append(
            {
                "env_var": f"{prefix}{name.upper()}",
                "type": type_name,
                "default": display_default,
                "required": is_required,
                "description": field.description or "",
            }
        )

    return {
        "class_name": settings_class.__name__,
        "prefix": prefix,
        "doc": settings_class.__doc__ or "",
        "properties": properties,
    }


def export_settings(output_path: Path | None = None) -> Path:
    data = {
        "version": __version__,
        "settings": {ProfileSettings.__name__: get_model_metadata(ProfileSettings)},
    }

    output_path = output_path or root_path / "docs" / "env-vars.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Exported settings to {output_path}")
    return output_path


if __name__ == "__main__":
    export_settings(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
