"""
JavaScript evaluated inside audited pages.

Every script that reads elements returns plain objects shaped like
``ElementProbe`` (snake_case keys), built by the shared ``describe``
helper so the Python side can validate them in one place.
"""

from __future__ import annotations

# Shared element description. Expects `limit` (snippet length) in scope.
_DESCRIBE = """
const describe = (el) => {
  const tag = el.tagName.toLowerCase();
  let selector = tag;
  if (el.id) selector += '#' + el.id;
  const cls = typeof el.className === 'string' ? el.className : (el.getAttribute('class') || '');
  const classes = cls.trim().split(/\\s+/).filter(Boolean);
  if (classes.length) selector += '.' + classes.join('.');
  const rect = el.getBoundingClientRect();
  const style = window.getComputedStyle(el);
  const html = el.outerHTML || '';
  return {
    selector: selector,
    html: html.length > limit ? html.slice(0, limit) + '...' : html,
    tag_name: tag,
    tab_index: typeof el.tabIndex === 'number' ? el.tabIndex : null,
    tab_index_attr: el.getAttribute('tabindex'),
    role: el.getAttribute('role'),
    element_id: el.id || null,
    class_name: cls || null,
    aria_modal: el.getAttribute('aria-modal'),
    aria_expanded: el.getAttribute('aria-expanded'),
    aria_pressed: el.getAttribute('aria-pressed'),
    aria_selected: el.getAttribute('aria-selected'),
    has_href: el.hasAttribute('href'),
    has_event_handler: ['onclick', 'onkeydown', 'onkeyup', 'onkeypress'].some((a) => el.hasAttribute(a)),
    disabled: !!el.disabled,
    width: rect.width,
    height: rect.height,
    display: style.display,
    visibility: style.visibility,
    opacity: style.opacity,
  };
};
"""

FOCUSABLE_QUERY = ", ".join(
    [
        "a[href]",
        "area[href]",
        "button",
        "input:not([type='hidden'])",
        "select",
        "textarea",
        "iframe",
        "[tabindex]",
        "audio[controls]",
        "video[controls]",
        "[contenteditable]:not([contenteditable='false'])",
    ]
)

INTERACTIVE_QUERY = ", ".join(
    [
        "[onclick]",
        "[onkeydown]",
        "[onkeyup]",
        "[onkeypress]",
        "[role='button']",
        "[role='link']",
        "[role='menuitem']",
        "[role='tab']",
        "[role='checkbox']",
        "[role='radio']",
    ]
)

QUERY_ELEMENTS = (
    "([query, limit]) => {"
    + _DESCRIBE
    + "return Array.from(document.querySelectorAll(query)).map(describe); }"
)

ACTIVE_ELEMENT = (
    "(limit) => {"
    + _DESCRIBE
    + """
  const el = document.activeElement;
  if (!el || el === document.body || el === document.documentElement) return null;
  return describe(el);
}"""
)

ACTIVE_ANCESTRY = (
    "(limit) => {"
    + _DESCRIBE
    + """
  const chain = [];
  let el = document.activeElement;
  while (el && el !== document.body && el !== document.documentElement) {
    chain.push(describe(el));
    el = el.parentElement;
  }
  return chain;
}"""
)

ARIA_STATE = """(selector) => {
  const el = document.querySelector(selector);
  if (!el) return null;
  return {
    expanded: el.getAttribute('aria-expanded'),
    pressed: el.getAttribute('aria-pressed'),
    selected: el.getAttribute('aria-selected'),
  };
}"""

FOCUS_DOCUMENT_START = """() => {
  if (document.activeElement && document.activeElement.blur) document.activeElement.blur();
  if (document.body) {
    const hadTabIndex = document.body.hasAttribute('tabindex');
    if (!hadTabIndex) document.body.setAttribute('tabindex', '-1');
    document.body.focus();
    if (!hadTabIndex) document.body.removeAttribute('tabindex');
  }
}"""

AXE_RUN = """async (options) => {
  const r = await axe.run(document, options);
  return {
    violations: r.violations,
    incomplete: r.incomplete,
    passes: r.passes.length,
    inapplicable: r.inapplicable.length,
    version: r.testEngine ? r.testEngine.version : null,
  };
}"""

AXE_RULES = """(tags) => axe.getRules(tags && tags.length ? tags : undefined)"""

ACE_RUN = """async (policy) => {
  const checker = new ace.Checker();
  const report = await checker.check(document, [policy]);
  return report.results.map((r) => ({
    ruleId: r.ruleId,
    value: r.value,
    level: r.level || null,
    message: r.message || '',
    snippet: r.snippet || '',
    path: r.path || {},
  }));
}"""
