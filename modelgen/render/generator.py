"""Model definition code generator."""

from typing import Any, Dict, List, Mapping

from ..database.models import TableModel
from ..database.type_mappers import SemanticType


class ModelRenderer:
    """Renders ``TableModel`` objects as JavaScript model definition modules."""

    def __init__(self, indentation: int = 1, spaces: bool = False, global_name: str = "Sequelize"):
        self.indentation = indentation
        self.spaces = spaces
        self.global_name = global_name
        self.indent = (" " if spaces else "\t") * indentation

    def _pad(self, level: int) -> str:
        return self.indent * level

    def _quote(self, value: Any) -> str:
        """Quote a string for a single-quoted JavaScript literal."""
        return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"

    def render_type(self, semantic_type: SemanticType) -> str:
        """Render a semantic type as a constructor expression."""
        if semantic_type.literal:
            return '"' + semantic_type.name + '"'
        if semantic_type.is_enum:
            return "DataTypes." + semantic_type.expression()
        return f"{self.global_name}.{semantic_type.expression()}"

    def render_value(self, key: str, value: Any, level: int) -> str:
        """Render one attribute value."""
        if isinstance(value, SemanticType):
            return self.render_type(value)
        if isinstance(value, bool):
            return "true" if value else "false"
        if key == "defaultValue":
            return f"{self.global_name}.literal({self._quote(value)})"
        if isinstance(value, Mapping):
            lines = ["{"]
            items = [
                f"{self._pad(level + 1)}{k}: {self.render_value(k, v, level + 1)}"
                for k, v in value.items()
            ]
            lines.append(",\n".join(items))
            lines.append(f"{self._pad(level)}}}")
            return "\n".join(lines)
        if value is None:
            return "null"
        return self._quote(value)

    def _render_block(self, items: Mapping[str, Any], level: int) -> List[str]:
        return [
            f"{self._pad(level)}{key}: {self.render_value(key, value, level)}"
            for key, value in items.items()
        ]

    def render(self, model: TableModel) -> str:
        """Render one table model to module text."""
        lines = [f"/* jshint indent: {self.indentation} */", "", "module.exports = {"]
        lines.append(f"{self._pad(1)}attributes: {{")

        column_blocks = []
        for column in model.columns:
            block = [f"{self._pad(2)}{column.rendered_name}: {{"]
            block.append(",\n".join(self._render_block(column.attributes(), 3)))
            block.append(f"{self._pad(2)}}}")
            column_blocks.append("\n".join(block))
        if column_blocks:
            lines.append(",\n".join(column_blocks))

        lines.append(f"{self._pad(1)}}},")
        lines.append(f"{self._pad(1)}options: {{")

        options = model.options()
        option_lines = self._render_block(options, 2)
        # classMethods before timestamps, hooks last
        option_lines.insert(len(option_lines) - 1, f"{self._pad(2)}classMethods: {{}}")
        option_lines.append(f"{self._pad(2)}hooks: {{}}")
        lines.append(",\n".join(option_lines))

        lines.append(f"{self._pad(1)}}}")
        lines.append("};")
        return "\n".join(lines) + "\n"

    def render_all(self, models: Mapping[str, TableModel]) -> Dict[str, str]:
        """Render every model, keyed by table name."""
        return {table: self.render(model) for table, model in models.items()}
