"""
In-document scripts evaluated through SessionDriver.query().

Every script is a function expression taking at most one argument.
"""

# Full rendered document, parsed locally by the extraction passes
DOCUMENT_HTML = "() => document.documentElement.outerHTML"

# Raw page-state signals for current-page detection
PAGE_STATE = """
(sel) => {
    const indicator = document.querySelector(sel.indicator);
    const input = document.querySelector(sel.input);
    return {
        indicator: indicator ? indicator.textContent.trim() : null,
        input: input ? String(input.value || '').trim() : null,
    };
}
"""

# href of the first matching "next" control, or null
NEXT_HREF = """
(selectors) => {
    for (const sel of selectors) {
        const el = document.querySelector(sel);
        if (el) return el.href || null;
    }
    return null;
}
"""

ELEMENT_EXISTS = "(sel) => !!document.querySelector(sel)"

BODY_CONTAINS = "(text) => document.body.textContent.includes(text)"

# Fill the sign-in form without triggering field handlers twice
FILL_LOGIN = """
(args) => {
    const email = document.querySelector(args.emailSelector);
    const password = document.querySelector(args.passwordSelector);
    if (email) email.value = args.email;
    if (password) password.value = args.password;
    return !!(email && password);
}
"""

# Select the first option whose label contains the category and fire change
SELECT_CATEGORY = """
(args) => {
    const select = document.querySelector(args.selector);
    if (!select) return null;
    for (let i = 0; i < select.options.length; i++) {
        if (select.options[i].text.includes(args.category)) {
            select.selectedIndex = i;
            select.dispatchEvent(new Event('change', { bubbles: true }));
            return select.options[i].text;
        }
    }
    return null;
}
"""

SELECTED_CATEGORY = """
(sel) => {
    const select = document.querySelector(sel);
    if (!select || select.selectedIndex < 0) return null;
    return select.options[select.selectedIndex].text;
}
"""
