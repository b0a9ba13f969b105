"""License header templates and rendering."""

from __future__ import annotations

from enum import Enum

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from .errors import RenderError
from .models import CopyrightInfo


class HeaderTemplate(str, Enum):
    APACHE2 = "apache2.0"
    BSD = "bsd"


_APACHE2 = """\
{{ comment }} Copyright {{ year }} {{ holder }}. All Rights Reserved.
{{ comment }}
{{ comment }} Licensed under the Apache License, Version 2.0 (the "License");
{{ comment }} you may not use this file except in compliance with the License.
{{ comment }} You may obtain a copy of the License at
{{ comment }}
{{ comment }}      http://www.apache.org/licenses/LICENSE-2.0
{{ comment }}
{{ comment }} Unless required by applicable law or agreed to in writing, software
{{ comment }} distributed under the License is distributed on an "AS IS" BASIS,
{{ comment }} WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
{{ comment }} See the License for the specific language governing permissions and
{{ comment }} limitations under the License.

"""

_BSD = """\
{{ comment }} Copyright {{ year }} {{ holder }}. All rights reserved.
{{ comment }} Use of this source code is governed by a BSD-style
{{ comment }} license that can be found in the LICENSE file.

"""

_TEMPLATES = {
    HeaderTemplate.APACHE2.value: _APACHE2,
    HeaderTemplate.BSD.value: _BSD,
}

_ENVIRONMENT = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def select_template(option: str | None) -> HeaderTemplate:
    """Map a user-supplied template name onto a built-in template; Apache 2.0 is the fallback."""
    if option and option.strip().lower() == HeaderTemplate.BSD.value:
        return HeaderTemplate.BSD
    return HeaderTemplate.APACHE2


def render_header(
    info: CopyrightInfo,
    template: HeaderTemplate = HeaderTemplate.APACHE2,
    *,
    comment: str = "//",
) -> bytes:
    try:
        text = _ENVIRONMENT.get_template(template.value).render(
            year=info.year,
            holder=info.holder,
            comment=comment,
        )
    except TemplateError as exc:
        raise RenderError(f"Failed to render {template.value} header: {exc}") from exc
    return text.encode("utf-8")


__all__ = ["HeaderTemplate", "render_header", "select_template"]
