from jinja2 import Environment
from markupsafe import Markup

from domain.models import StoredRecipe


class RecipeDetail:
    def __init__(
        self,
        recipe: StoredRecipe,
        *,
        environment: Environment,
        template_name: str = "recipe-detail.html",
    ) -> None:
        self.recipe = recipe
        self.env = environment
        self.name = template_name

    @property
    def title(self) -> str:
        return self.recipe.title

    @property
    def ingredients(self) -> list[str]:
        return self.recipe.ingredients

    @property
    def content(self) -> str:
        return Markup(self.recipe.html)

    def render(self) -> str:
        return self.env.get_template(self.name).render(recipe=self)
