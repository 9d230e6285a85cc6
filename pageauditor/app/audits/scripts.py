"""
In-page inspection scripts.

Each script is a function expression evaluated in page scope. Scripts only
collect raw measurements; thresholds, penalties and grades are applied in
Python so that every check shares one scoring path.

Level scripts return ``{violations, warnings, passes}`` where every entry is
``{criterion, description, elements}`` and ``elements`` holds short CSS
selectors (at most five per entry).
"""

# ----------------------------------------------------------------------
# Shared helpers (inlined into each level script)
# ----------------------------------------------------------------------
_LEVEL_PRELUDE = r"""
  const violations = [];
  const warnings = [];
  const passes = [];
  const sel = (el) => {
    if (!el || !el.tagName) return String(el);
    let s = el.tagName.toLowerCase();
    if (el.id) s += '#' + el.id;
    const cls = typeof el.className === 'string' ? el.className.trim().split(/\s+/)[0] : '';
    if (cls) s += '.' + cls;
    return s;
  };
  const add = (kind, criterion, description, elements = []) => {
    const entry = { criterion, description, elements: elements.slice(0, 5).map(sel) };
    if (kind === 'violation') violations.push(entry);
    else if (kind === 'warning') warnings.push(entry);
    else passes.push(entry);
  };
  const visible = (el) => {
    const r = el.getBoundingClientRect();
    const cs = window.getComputedStyle(el);
    return r.width > 0 && r.height > 0 && cs.visibility !== 'hidden' && cs.display !== 'none';
  };
  const accessibleName = (el) => (
    (el.getAttribute('aria-label') || '').trim() ||
    (el.getAttribute('aria-labelledby') ? 'labelledby' : '') ||
    (el.textContent || '').trim() ||
    (el.getAttribute('title') || '').trim() ||
    (el.querySelector('img[alt]') ? el.querySelector('img[alt]').alt.trim() : '')
  );
"""

_LEVEL_RETURN = r"""
  return { violations, warnings, passes };
"""


# ----------------------------------------------------------------------
# Performance
# ----------------------------------------------------------------------
PERFORMANCE_SCRIPT = r"""
() => {
  const nav = performance.getEntriesByType('navigation')[0] || {};
  const fcp = performance.getEntriesByName('first-contentful-paint')[0];
  const lcp = performance.getEntriesByType('largest-contentful-paint').slice(-1)[0];
  const fp = performance.getEntriesByName('first-paint')[0];
  let cls = 0;
  try {
    cls = performance.getEntriesByType('layout-shift')
      .reduce((acc, e) => acc + (e.hadRecentInput ? 0 : e.value), 0);
  } catch (e) {}
  return {
    ttfb: nav.responseStart || null,
    fcp: fcp ? fcp.startTime : null,
    lcp: lcp ? lcp.startTime : null,
    dcl: nav.domContentLoadedEventEnd || null,
    load_end: nav.loadEventEnd || null,
    cls: cls,
    inp: null,
    first_paint: fp ? fp.startTime : null,
    redirect_time: nav.redirectEnd ? nav.redirectEnd - nav.redirectStart : 0,
    dns_time: nav.domainLookupEnd ? nav.domainLookupEnd - nav.domainLookupStart : 0,
    connect_time: nav.connectEnd ? nav.connectEnd - nav.connectStart : 0,
  };
}
"""


# ----------------------------------------------------------------------
# Content weight
# ----------------------------------------------------------------------
CONTENT_WEIGHT_SCRIPT = r"""
() => {
  const nav = performance.getEntriesByType('navigation')[0];
  const typeOf = (url, initiator) => {
    if (/\.css(\?|$)/i.test(url)) return 'css';
    if (/\.m?js(\?|$)/i.test(url)) return 'javascript';
    if (/\.(jpe?g|png|gif|svg|webp|avif)(\?|$)/i.test(url)) return 'image';
    if (/\.(woff2?|ttf|eot|otf)(\?|$)/i.test(url)) return 'font';
    if (/\.(mp4|webm|avi)(\?|$)/i.test(url)) return 'video';
    if (/\.(mp3|wav|ogg)(\?|$)/i.test(url)) return 'audio';
    if (initiator === 'xmlhttprequest' || initiator === 'fetch') return 'xhr';
    return 'other';
  };
  const resources = performance.getEntriesByType('resource').map((r) => ({
    url: r.name,
    type: typeOf(r.name, r.initiatorType),
    size: r.transferSize || r.decodedBodySize || 0,
    duration: Math.round(r.responseEnd - r.requestStart),
    cached: r.transferSize === 0,
  }));
  return {
    resources,
    navigation_timing: nav ? {
      dom_content_loaded: Math.round(nav.domContentLoadedEventEnd - nav.startTime),
      load_complete: Math.round(nav.loadEventEnd - nav.startTime),
      first_byte: Math.round(nav.responseStart - nav.startTime),
    } : {},
  };
}
"""


# ----------------------------------------------------------------------
# Mobile
# ----------------------------------------------------------------------
MOBILE_SCRIPT = r"""
({ min_touch: minTouch, min_font: minFont }) => {
  const meta = document.querySelector('meta[name="viewport"]');
  const content = meta ? (meta.getAttribute('content') || '') : null;
  const viewport = {
    exists: !!meta,
    content: content,
    is_responsive: !!content && content.includes('width=device-width'),
    user_scalable: !content || !/user-scalable\s*=\s*(no|0)/.test(content),
  };

  const clickable = document.querySelectorAll(
    'a, button, input[type="button"], input[type="submit"], input[type="reset"], [onclick], [role="button"]'
  );
  const small = [];
  clickable.forEach((el) => {
    const r = el.getBoundingClientRect();
    const cs = window.getComputedStyle(el);
    if (r.width <= 0 || r.height <= 0 || cs.visibility === 'hidden' || cs.display === 'none') return;
    if (r.width < minTouch || r.height < minTouch) {
      small.push({
        element: el.tagName.toLowerCase() + (el.id ? '#' + el.id : ''),
        width: Math.round(r.width),
        height: Math.round(r.height),
      });
    }
  });

  const textEls = document.querySelectorAll('p, span, div, h1, h2, h3, h4, h5, h6, li, td, th');
  const sizes = [];
  let smallText = 0;
  textEls.forEach((el) => {
    const size = parseFloat(window.getComputedStyle(el).fontSize);
    if (el.offsetParent !== null && size > 0) {
      sizes.push(size);
      if (size < minFont) smallText++;
    }
  });

  const images = document.querySelectorAll('img');
  let nonResponsive = 0;
  images.forEach((img) => {
    const responsive = img.hasAttribute('srcset') || img.hasAttribute('sizes') ||
      img.style.maxWidth === '100%' || img.style.width === '100%';
    if (!responsive && img.offsetParent !== null) nonResponsive++;
  });

  const inputs = document.querySelectorAll('input');
  let nonOptimized = 0;
  inputs.forEach((input) => {
    const type = (input.type || '').toLowerCase();
    const key = ((input.name || '') + ' ' + (input.id || '')).toLowerCase();
    if (key.includes('email') && type !== 'email') nonOptimized++;
    else if ((key.includes('tel') || key.includes('phone')) && type !== 'tel') nonOptimized++;
    else if (key.includes('number') && type !== 'number') nonOptimized++;
  });

  return {
    viewport,
    touch_targets: { total: clickable.length, too_small: small.length, details: small.slice(0, 10) },
    text_readability: {
      total_elements: textEls.length,
      small_text_elements: smallText,
      average_font_size: sizes.length ? Math.round(sizes.reduce((a, b) => a + b, 0) / sizes.length) : 0,
    },
    layout: {
      has_horizontal_scroll: document.documentElement.scrollWidth > window.innerWidth,
      page_width: document.documentElement.scrollWidth,
      viewport_width: window.innerWidth,
    },
    images: { total: images.length, non_responsive: nonResponsive },
    inputs: { total: inputs.length, non_optimized: nonOptimized },
    plugins: document.querySelectorAll('object, embed, applet').length,
  };
}
"""


# ----------------------------------------------------------------------
# Transport security
# ----------------------------------------------------------------------
TLS_PROBE_SCRIPT = r"""
() => ({ protocol: location.protocol, is_secure: location.protocol === 'https:' })
"""


# ----------------------------------------------------------------------
# Accessibility: WCAG 2.2 Level A
# ----------------------------------------------------------------------
WCAG_LEVEL_A_SCRIPT = "() => {" + _LEVEL_PRELUDE + r"""
  // 1.1.1 Non-text Content
  const imgs = [...document.querySelectorAll('img')];
  const noAlt = imgs.filter((i) => !i.hasAttribute('alt') && i.getAttribute('role') !== 'presentation');
  if (noAlt.length) add('violation', '1.1.1', 'Images without alt text', noAlt);
  else add('pass', '1.1.1', 'All images have appropriate alt text');
  const decorative = imgs.filter((i) => i.getAttribute('role') === 'presentation' && i.alt);
  if (decorative.length) add('warning', '1.1.1', 'Decorative images should have empty alt text', decorative);

  // 1.2.2 Captions (Prerecorded)
  const videos = [...document.querySelectorAll('video')];
  const uncaptioned = videos.filter((v) => !v.muted && !v.querySelector('track[kind="captions"], track[kind="subtitles"]'));
  if (uncaptioned.length) add('violation', '1.2.2', 'Videos with audio lack captions', uncaptioned);
  else if (videos.length) add('pass', '1.2.2', 'Videos have captions');

  // 1.3.1 Info and Relationships
  const fields = [...document.querySelectorAll('input:not([type="hidden"]):not([type="submit"]):not([type="button"]), select, textarea')];
  const unlabeled = fields.filter((f) => !(
    (f.id && document.querySelector('label[for="' + CSS.escape(f.id) + '"]')) ||
    f.closest('label') || f.getAttribute('aria-label') || f.getAttribute('aria-labelledby')
  ));
  if (unlabeled.length) add('violation', '1.3.1', 'Form fields without associated labels', unlabeled);
  else if (fields.length) add('pass', '1.3.1', 'Form fields are labelled');
  const headings = [...document.querySelectorAll('h1, h2, h3, h4, h5, h6')];
  let skipped = [];
  headings.reduce((prev, h) => {
    const lvl = Number(h.tagName[1]);
    if (prev && lvl > prev + 1) skipped.push(h);
    return lvl;
  }, 0);
  if (skipped.length) add('warning', '1.3.1', 'Heading levels are skipped', skipped);

  // 1.4.2 Audio Control
  const autoplay = [...document.querySelectorAll('audio[autoplay], video[autoplay]')].filter((m) => !m.muted && !m.hasAttribute('controls'));
  if (autoplay.length) add('violation', '1.4.2', 'Auto-playing media without controls', autoplay);
  else add('pass', '1.4.2', 'No uncontrolled auto-playing audio');

  // 2.1.1 Keyboard
  const mouseOnly = [...document.querySelectorAll('[onclick]')].filter((el) =>
    !['A', 'BUTTON', 'INPUT', 'SELECT', 'TEXTAREA'].includes(el.tagName) && !el.hasAttribute('tabindex'));
  if (mouseOnly.length) add('violation', '2.1.1', 'Click handlers on elements that cannot receive keyboard focus', mouseOnly);
  else add('pass', '2.1.1', 'Interactive elements are keyboard reachable');

  // 2.2.2 Pause, Stop, Hide
  const moving = [...document.querySelectorAll('marquee, blink')];
  if (moving.length) add('violation', '2.2.2', 'Moving content without a pause mechanism', moving);

  // 2.4.1 Bypass Blocks
  const skip = document.querySelector('a[href^="#"]');
  const landmarks = document.querySelector('main, [role="main"], nav, [role="navigation"]');
  if (!skip && !landmarks) add('violation', '2.4.1', 'No skip link or landmarks to bypass repeated blocks');
  else add('pass', '2.4.1', 'Repeated blocks can be bypassed');

  // 2.4.2 Page Titled
  if (!document.title || !document.title.trim()) add('violation', '2.4.2', 'Page has no title');
  else add('pass', '2.4.2', 'Page has a title');

  // 2.4.3 Focus Order
  const positive = [...document.querySelectorAll('[tabindex]')].filter((el) => Number(el.getAttribute('tabindex')) > 0);
  if (positive.length) add('warning', '2.4.3', 'Positive tabindex values alter the focus order', positive);
  else add('pass', '2.4.3', 'Focus order follows the DOM');

  // 2.4.4 Link Purpose (In Context)
  const vague = /^(click here|here|more|read more|link|mehr|hier)$/i;
  const links = [...document.querySelectorAll('a[href]')];
  const emptyLinks = links.filter((a) => !accessibleName(a));
  const vagueLinks = links.filter((a) => vague.test((a.textContent || '').trim()));
  if (emptyLinks.length) add('violation', '2.4.4', 'Links without discernible text', emptyLinks);
  if (vagueLinks.length) add('warning', '2.4.4', 'Link text is not descriptive', vagueLinks);
  if (!emptyLinks.length && !vagueLinks.length && links.length) add('pass', '2.4.4', 'Links have descriptive text');

  // 2.5.3 Label in Name
  const mismatched = [...document.querySelectorAll('button[aria-label], a[aria-label]')].filter((el) => {
    const text = (el.textContent || '').trim().toLowerCase();
    return text && !el.getAttribute('aria-label').toLowerCase().includes(text);
  });
  if (mismatched.length) add('warning', '2.5.3', 'Accessible name does not contain the visible label', mismatched);

  // 3.1.1 Language of Page
  if (!document.documentElement.getAttribute('lang')) add('violation', '3.1.1', 'The html element has no lang attribute', [document.documentElement]);
  else add('pass', '3.1.1', 'Page language is specified');

  // 3.2.2 On Input
  const autoSubmit = [...document.querySelectorAll('select[onchange]')];
  if (autoSubmit.length) add('warning', '3.2.2', 'Selects change context on input', autoSubmit);

  // 3.3.2 Labels or Instructions
  const required = [...document.querySelectorAll('[required]')].filter((f) => !f.getAttribute('aria-describedby') && !f.getAttribute('placeholder') && !f.closest('label'));
  if (required.length) add('warning', '3.3.2', 'Required fields without instructions', required);

  // 4.1.2 Name, Role, Value
  const controls = [...document.querySelectorAll('button, [role="button"], [role="link"], [role="checkbox"], [role="tab"]')];
  const nameless = controls.filter((el) => !accessibleName(el));
  if (nameless.length) add('violation', '4.1.2', 'Controls without an accessible name', nameless);
  else if (controls.length) add('pass', '4.1.2', 'Controls expose an accessible name');
""" + _LEVEL_RETURN + "}"


# ----------------------------------------------------------------------
# Accessibility: WCAG 2.2 Level AA
# ----------------------------------------------------------------------
WCAG_LEVEL_AA_SCRIPT = "() => {" + _LEVEL_PRELUDE + r"""
  // 1.3.4 Orientation
  const lock = [...document.querySelectorAll('meta[name="screen-orientation"], meta[name="x5-orientation"]')];
  if (lock.length) add('violation', '1.3.4', 'Display orientation is locked', lock);
  else add('pass', '1.3.4', 'Content is not restricted to one orientation');

  // 1.3.5 Identify Input Purpose
  const personal = [...document.querySelectorAll('input[type="email"], input[type="tel"], input[name*="name" i], input[name*="address" i]')];
  const noAuto = personal.filter((f) => !f.getAttribute('autocomplete') || f.getAttribute('autocomplete') === 'off');
  if (noAuto.length) add('warning', '1.3.5', 'Personal data fields without autocomplete purpose', noAuto);
  else if (personal.length) add('pass', '1.3.5', 'Input purpose is identified');

  // 1.4.4 Resize Text
  const viewport = document.querySelector('meta[name="viewport"]');
  const content = viewport ? viewport.getAttribute('content') || '' : '';
  if (/user-scalable\s*=\s*(no|0)/.test(content) || /maximum-scale\s*=\s*1(\.0)?\b/.test(content)) {
    add('violation', '1.4.4', 'Zooming is disabled by the viewport', [viewport]);
  } else add('pass', '1.4.4', 'Text can be resized');

  // 1.4.5 Images of Text
  const textImages = [...document.querySelectorAll('img[alt]')].filter((i) => i.alt.split(/\s+/).length > 6);
  if (textImages.length) add('warning', '1.4.5', 'Images may contain text', textImages);

  // 1.4.10 Reflow
  if (document.documentElement.scrollWidth > window.innerWidth + 1) add('violation', '1.4.10', 'Content requires horizontal scrolling', [document.body]);
  else add('pass', '1.4.10', 'Content reflows without horizontal scrolling');

  // 2.4.6 Headings and Labels
  const emptyHeadings = [...document.querySelectorAll('h1, h2, h3, h4, h5, h6')].filter((h) => !(h.textContent || '').trim());
  if (emptyHeadings.length) add('violation', '2.4.6', 'Empty headings', emptyHeadings);
  else add('pass', '2.4.6', 'Headings are descriptive');

  // 2.4.7 Focus Visible
  const noOutline = [...document.querySelectorAll('a[href], button, input, select, textarea')].filter((el) => {
    const cs = window.getComputedStyle(el);
    return cs.outlineStyle === 'none' && cs.outlineWidth === '0px' && el.matches(':focus-visible') === false && el.style.outline === 'none';
  });
  if (noOutline.length) add('warning', '2.4.7', 'Focus outline removed inline', noOutline);
  else add('pass', '2.4.7', 'Focus indicator not suppressed');

  // 2.5.8 Target Size (Minimum)
  const tiny = [...document.querySelectorAll('a[href], button, [role="button"]')].filter((el) => {
    if (!visible(el)) return false;
    const r = el.getBoundingClientRect();
    return r.width < 24 || r.height < 24;
  });
  if (tiny.length) add('violation', '2.5.8', 'Targets smaller than 24 by 24 CSS pixels', tiny);
  else add('pass', '2.5.8', 'Targets meet the minimum size');

  // 3.1.2 Language of Parts
  const badLang = [...document.querySelectorAll('[lang]')].filter((el) => !/^[a-z]{2,3}(-[A-Za-z0-9]+)*$/i.test(el.getAttribute('lang')));
  if (badLang.length) add('violation', '3.1.2', 'Invalid lang attribute values', badLang);

  // 3.3.3 Error Suggestion
  const invalid = [...document.querySelectorAll('[aria-invalid="true"]')].filter((f) => !f.getAttribute('aria-describedby') && !f.getAttribute('aria-errormessage'));
  if (invalid.length) add('violation', '3.3.3', 'Invalid fields without an error description', invalid);

  // 3.3.8 Accessible Authentication (Minimum)
  const pw = [...document.querySelectorAll('input[type="password"]')];
  const blocked = pw.filter((f) => f.getAttribute('autocomplete') === 'off' || f.hasAttribute('onpaste'));
  if (blocked.length) add('violation', '3.3.8', 'Password fields block password managers or paste', blocked);
  else if (pw.length) add('pass', '3.3.8', 'Authentication supports password managers');

  // 4.1.3 Status Messages
  const status = document.querySelector('[role="status"], [role="alert"], [aria-live]');
  if (document.querySelector('form') && !status) add('warning', '4.1.3', 'Forms without a live region for status messages');
""" + _LEVEL_RETURN + "}"


# ----------------------------------------------------------------------
# Accessibility: new WCAG 2.2 criteria, AAA tier and experimental outcomes
# ----------------------------------------------------------------------
WCAG_ADVANCED_SCRIPT = r"""
() => {
  const sel = (el) => {
    if (!el || !el.tagName) return String(el);
    let s = el.tagName.toLowerCase();
    if (el.id) s += '#' + el.id;
    return s;
  };
  const check = (offenders, perIssue = 10) => ({
    passed: offenders.length === 0,
    issues: offenders.slice(0, 5).map(sel),
    score: Math.max(0, 100 - offenders.length * perIssue),
  });
  const focusable = [...document.querySelectorAll('a[href], button, input, select, textarea, [tabindex]')];
  const fixed = [...document.querySelectorAll('*')].filter((el) => {
    const p = window.getComputedStyle(el).position;
    return p === 'fixed' || p === 'sticky';
  });
  const obscured = focusable.filter((el) => {
    const r = el.getBoundingClientRect();
    return fixed.some((f) => {
      if (f.contains(el)) return false;
      const fr = f.getBoundingClientRect();
      return r.top < fr.bottom && r.bottom > fr.top && r.left < fr.right && r.right > fr.left;
    });
  });

  const new_criteria = {
    '2.4.11': check(obscured),
    '2.4.12': check(obscured, 5),
    '2.4.13': check(focusable.filter((el) => el.style.outline === 'none' || el.style.outlineWidth === '0px')),
    '2.5.7': check([...document.querySelectorAll('[draggable="true"]')].filter((el) => !el.querySelector('button'))),
    '2.5.8': check([...document.querySelectorAll('a[href], button')].filter((el) => {
      const r = el.getBoundingClientRect();
      return r.width > 0 && (r.width < 24 || r.height < 24);
    })),
    '3.2.6': check(document.querySelector('a[href*="help"], a[href*="contact"], a[href*="support"]') || !document.querySelector('form') ? [] : [document.body]),
    '3.3.7': check([...document.querySelectorAll('input[name*="email" i], input[name*="address" i], input[name*="phone" i]')].filter((f) => !f.getAttribute('autocomplete') || f.getAttribute('autocomplete') === 'off')),
    '3.3.8': check([...document.querySelectorAll('input[type="password"]')].filter((f) => f.getAttribute('autocomplete') === 'off' || f.hasAttribute('onpaste'))),
  };

  const tier = () => ({ violations: [], warnings: [], passes: [] });
  const push = (bucket, kind, criterion, description, elements = []) => {
    bucket[kind === 'violation' ? 'violations' : kind === 'warning' ? 'warnings' : 'passes']
      .push({ criterion, description, elements: elements.slice(0, 5).map(sel) });
  };

  const aaa = tier();
  // 2.2.3 No Timing
  if (document.querySelector('meta[http-equiv="refresh"]')) push(aaa, 'violation', '2.2.3', 'Page refreshes on a timer', [document.querySelector('meta[http-equiv="refresh"]')]);
  else push(aaa, 'pass', '2.2.3', 'No timed refresh');
  // 2.4.9 Link Purpose (Link Only)
  const ambiguous = [...document.querySelectorAll('a[href]')].filter((a) => (a.textContent || '').trim().split(/\s+/).length < 2 && !a.getAttribute('aria-label'));
  if (ambiguous.length) push(aaa, 'warning', '2.4.9', 'Link text alone may not convey purpose', ambiguous);
  else push(aaa, 'pass', '2.4.9', 'Links describe their purpose');
  // 2.4.10 Section Headings
  const sections = [...document.querySelectorAll('section, article')].filter((s) => !s.querySelector('h1, h2, h3, h4, h5, h6'));
  if (sections.length) push(aaa, 'violation', '2.4.10', 'Sections without headings', sections);
  else push(aaa, 'pass', '2.4.10', 'Sections are organised with headings');
  // 2.4.12 Focus Not Obscured (Enhanced)
  if (obscured.length) push(aaa, 'violation', '2.4.12', 'Focusable elements overlap fixed content', obscured);
  else push(aaa, 'pass', '2.4.12', 'Focused elements are never obscured');
  // 2.5.5 Target Size (Enhanced)
  const under44 = [...document.querySelectorAll('a[href], button')].filter((el) => {
    const r = el.getBoundingClientRect();
    return r.width > 0 && (r.width < 44 || r.height < 44);
  });
  if (under44.length) push(aaa, 'violation', '2.5.5', 'Targets smaller than 44 by 44 CSS pixels', under44);
  else push(aaa, 'pass', '2.5.5', 'Targets meet the enhanced size');
  // 3.1.5 Reading Level
  const text = (document.body && document.body.textContent) || '';
  const sentences = text.split(/[.!?]+/).filter((s) => s.trim().length > 0);
  const words = sentences.reduce((n, s) => n + s.trim().split(/\s+/).length, 0);
  const avgWords = sentences.length ? words / sentences.length : 0;
  if (avgWords > 25) push(aaa, 'warning', '3.1.5', 'Average sentence length suggests advanced reading level');
  else push(aaa, 'pass', '3.1.5', 'Reading level is moderate');

  const experimental = tier();
  const media = [...document.querySelectorAll('img, video, audio, svg, canvas')];
  const noAlternative = media.filter((el) => !(el.hasAttribute('alt') || el.getAttribute('aria-label') || el.getAttribute('aria-labelledby') || el.querySelector('title, desc')));
  if (noAlternative.length) push(experimental, 'violation', 'text-alternatives', 'Media without any text alternative', noAlternative);
  else push(experimental, 'pass', 'text-alternatives', 'Media has text alternatives');
  const structure = document.querySelectorAll('h1, h2, h3, h4, h5, h6').length * 10 +
    document.querySelectorAll('main, nav, aside, header, footer, [role="main"], [role="navigation"]').length * 15 +
    document.querySelectorAll('ul, ol, dl').length * 5;
  if (structure < 60) push(experimental, 'warning', 'structured-content', 'Little semantic structure detected');
  else push(experimental, 'pass', 'structured-content', 'Content is structured');
  if (!document.querySelector('[aria-label*="help" i], [href*="help"], [href*="support"], [href*="contact"]')) push(experimental, 'warning', 'findable-help', 'No help mechanism found');
  else push(experimental, 'pass', 'findable-help', 'Help is findable');
  if (avgWords >= 20) push(experimental, 'warning', 'clear-language', 'Sentences are long on average');
  else push(experimental, 'pass', 'clear-language', 'Language is clear');

  return { new_criteria, level_aaa: aaa, experimental };
}
"""


# ----------------------------------------------------------------------
# Violation screenshots
# ----------------------------------------------------------------------
HIGHLIGHT_SCRIPT = r"""
(selector) => {
  document.querySelectorAll('[data-pageauditor-highlight]').forEach((el) => {
    el.style.outline = el.getAttribute('data-pageauditor-highlight');
    el.removeAttribute('data-pageauditor-highlight');
  });
  let element = null;
  try { element = document.querySelector(selector); } catch (e) { return false; }
  if (!element) return false;
  element.setAttribute('data-pageauditor-highlight', element.style.outline || '');
  element.style.outline = '3px solid red';
  element.style.outlineOffset = '2px';
  element.scrollIntoView({ block: 'center' });
  return true;
}
"""
