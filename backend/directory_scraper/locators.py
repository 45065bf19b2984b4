"""
Locators for the directory's listing and detail documents.

Each ladder is ordered by priority: the first locator is the primary one,
later entries are alternatives tried when it yields nothing.
"""

# ============================================================
# Listing page
# ============================================================

LISTING_ITEM_NAME = '.item--author--name'
LISTING_ITEM = '.item.item-comp'
LISTING_ITEM_LOGO = '.item-thumb-wrapper img'

# Filter marker that shows the category filter is still applied
LISTING_FILTER_MARKER = '.filter.with-close'

# ============================================================
# Pagination
# ============================================================

PAGE_INDICATOR = '.page span.active'
PAGE_INPUT = '.PageCurrent'

NEXT_CONTROL = '.pagi .number .page a.next'

# Looser alternatives for the synthetic-event strategy
NEXT_CONTROL_LADDER = [
    '.pagi .number .page a.next',
    '.page a.next',
    'a.next',
]

# ============================================================
# Detail page: company
# ============================================================

COMPANY_NAME = [
    '.cover__large--title',
    '.company-profile-header__title',
]

COMPANY_LOGO = [
    '#summary .cover__info-cover .cover__info-cover-thumb img',
    '.cover__info-cover-thumb img',
    '.cover__large .cover__info-cover .cover__info-cover-thumb img',
    '.cover__info-cover img',
    '.company-profile-header__logo-img',
    '.cover__large--image img',
]

COMPANY_BACKGROUND = [
    '.cover__large > img',
]

ACTIVITY_BLOCK = '.members'
ACTIVITY_LABEL = '.label-info'

ADDRESS_BLOCK = '.address'
ADDRESS_PHONE = '.phone'

DESCRIPTION_PARAGRAPHS = '.box.box--gray.grey-desc p'

LINKS = '.links a'
SOCIAL_LINKS = '.socials a'

INFO_ITEM = '.company-info__item'
INFO_LABEL = '.company-info__label'
INFO_DATA = '.company-info__data'

# ============================================================
# Detail page: staff
# ============================================================

STAFF_ITEM = '#staff .list-staff .item'
STAFF_NAME = '.item--name a'
STAFF_IMAGE = [
    '.item__wrapper .item-thumb a img',
    'img',
]
STAFF_ROLE = '.item--function'
STAFF_PHONE = '.tel.tel-people'
STAFF_MOBILE = '.mobile.mobile-people'
STAFF_EMAIL = [
    'ul.item-links li.mail a',
    'a[href^="mailto:"]',
]

# ============================================================
# Pre-pass and last-resort probes
# ============================================================

PRE_PASS_LOGO = [
    '#summary .cover__info-cover .cover__info-cover-thumb img',
    '.cover__info-cover-thumb img',
]
PRE_PASS_STAFF_IMAGE = '.item-thumb a img'

LAST_RESORT_HEADER_IMAGES = '.cover__info-cover img, .cover__large img'
LAST_RESORT_STAFF_IMAGE = 'img'

# ============================================================
# Overlays and session bring-up
# ============================================================

# Overlay close controls, ordered by priority (plain CSS, probed in-document)
OVERLAY_CLOSE_SELECTORS = [
    '.modal-cookies-consent-accept-all',
    '#onetrust-accept-btn-handler',
    '[id*="cookie"] button[class*="accept"]',
    '[id*="consent"] button[class*="accept"]',
    '[class*="modal"] button[aria-label*="close" i]',
    'button[aria-label="Close dialog"]',
]

LOGIN_EMAIL = '#Email'
LOGIN_PASSWORD = '#Password'
LOGIN_SUBMIT = [
    '.button[type="submit"]',
    'button[type="submit"]',
    '.button',
]

CATEGORY_SELECT = '#SelectCompanyActivity'
FILTER_RESET = '.form-row .button.button--reset'
FILTER_SUBMIT = [
    'button.btn-primary',
    'button.button--submit',
    'button[type="submit"]',
    '.button--submit',
]
