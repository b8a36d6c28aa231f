"""Status page served at the configured status path."""

from __future__ import annotations

_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>FastDL Update</title>
  <style>
    html, body {
      height: 100%; margin: 0; overflow: hidden;
      font-family: sans-serif; background: #1f2235; color: #e0e0e0;
      display: flex; flex-direction: column;
    }
    header {
      background: linear-gradient(90deg, #5a3fda, #8b59fb);
      padding: 1rem 2rem; color: #fff; font-size: 1.5rem;
    }
    main { flex: 1 1 auto; padding: 1rem; overflow: hidden; }
    #status {
      height: 100%; box-sizing: border-box; overflow-y: auto;
      background: #1e1f33; border-radius: 4px; padding: 0.75rem;
      font-family: "Courier New", monospace; font-size: 0.9rem; line-height: 1.4;
    }
    #status p { margin: 0; }
    .msg-copied     { color: #a6e22e; }
    .msg-compressed { color: #66d9ef; }
    .msg-skipped    { color: #fd971f; }
    .msg-error      { color: #f92672; font-weight: bold; }
    .msg-done       { color: #ae81ff; font-weight: bold; }
  </style>
</head>
<body>
  <header>FastDL Updater</header>
  <main><div id="status"><p>Connecting...</p></div></main>
  <script>
    const statusDiv = document.getElementById('status');
    const source = new EventSource('__EVENTS_URL__');
    let started = false;

    function show(text, cls) {
      if (!started) { statusDiv.innerHTML = ''; started = true; }
      const p = document.createElement('p');
      p.textContent = text;
      if (cls) p.classList.add(cls);
      statusDiv.appendChild(p);
      statusDiv.scrollTop = statusDiv.scrollHeight;
    }

    source.addEventListener('progress', e => {
      const msg = e.data;
      if (msg.startsWith('Copied:')) show(msg, 'msg-copied');
      else if (msg.startsWith('Compressed:')) show(msg, 'msg-compressed');
      else if (msg.startsWith('Skipping')) show(msg, 'msg-skipped');
      else show(msg);
    });
    source.addEventListener('done', e => { show(e.data, 'msg-done'); source.close(); });
    source.addEventListener('error', e => {
      if (e.data) { show('Error: ' + e.data, 'msg-error'); return; }
      // transport-level error: the server closed the stream
      source.close();
    });
  </script>
</body>
</html>
"""


def render_status_page(events_url: str) -> str:
    return _TEMPLATE.replace("__EVENTS_URL__", events_url)
