INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Sales Call Analyzer</title>
  <style>
    body { font-family: system-ui, sans-serif; background: #eef2ff; margin: 0; padding: 2rem; }
    main { max-width: 56rem; margin: 0 auto; }
    .card { background: #fff; border-radius: .75rem; padding: 1.5rem; margin-bottom: 1.5rem; }
    .metrics { display: grid; grid-template-columns: repeat(3, 1fr); gap: 1rem; }
    .error { color: #dc2626; }
    .positive { color: #16a34a; } .neutral { color: #ca8a04; } .negative { color: #dc2626; }
    pre { white-space: pre-wrap; background: #f9fafb; padding: 1rem; }
  </style>
</head>
<body>
<main>
  <h1>Sales Call Analyzer</h1>
  <p>Analyze YouTube sales calls to get insights on talk-time ratio, questions asked,
     sentiment, and actionable recommendations.</p>

  <form id="analyze-form" class="card">
    <label for="youtube-url">YouTube Video URL</label>
    <input id="youtube-url" placeholder="https://www.youtube.com/watch?v=..." size="60">
    <button id="submit" type="submit" disabled>Analyze Sales Call</button>
    <p id="error" class="error" hidden></p>
  </form>

  <section id="results" class="card" hidden>
    <h2>Analysis Results
      <a href="/analysis/export/structured">JSON</a>
      <a href="/analysis/export/transcript">Transcript</a>
    </h2>
    <div class="metrics">
      <div><strong id="talk-time"></strong><br>Sales rep talking time</div>
      <div><strong id="questions"></strong><br>By sales representative</div>
      <div><strong id="monologue"></strong><br>Continuous talking time</div>
    </div>
    <p>Sentiment: <span id="sentiment"></span></p>
    <ul id="insights"></ul>
    <pre id="transcript"></pre>
  </section>
</main>
<script>
  const input = document.getElementById("youtube-url");
  const button = document.getElementById("submit");
  const errorBox = document.getElementById("error");
  const results = document.getElementById("results");

  input.addEventListener("input", () => { button.disabled = !input.value; });

  function render(state) {
    errorBox.hidden = state.status !== "failed";
    errorBox.textContent = state.error || "";
    results.hidden = state.status !== "success";
    button.disabled = state.status === "loading" || !input.value;
    button.textContent = state.status === "loading" ? "Analyzing..." : "Analyze Sales Call";
    if (state.status !== "success") return;
    const r = state.result;
    document.getElementById("talk-time").textContent = r.talkTimeRatio + "%";
    document.getElementById("questions").textContent = r.questionsCount;
    document.getElementById("monologue").textContent = r.longestMonologue + "s";
    const sentiment = document.getElementById("sentiment");
    sentiment.className = r.sentiment;
    sentiment.textContent = r.sentiment.charAt(0).toUpperCase() + r.sentiment.slice(1);
    const list = document.getElementById("insights");
    list.replaceChildren(...r.insights.map((text) => {
      const li = document.createElement("li");
      li.textContent = text;
      return li;
    }));
    document.getElementById("transcript").textContent = r.transcript;
  }

  document.getElementById("analyze-form").addEventListener("submit", async (e) => {
    e.preventDefault();
    render({ status: "idle" });
    render({ status: "loading" });
    const response = await fetch("/analyze?wait=true", {
      method: "POST",
      headers: { "Content-Type": "application/json" },
      body: JSON.stringify({ url: input.value }),
    }).catch(() => null);
    if (!response) {
      render({ status: "failed", error: "Could not reach the server." });
      return;
    }
    const body = await response.json();
    if (response.status === 400) {
      render({ status: "failed", error: body.detail });
      return;
    }
    render(await (await fetch("/analysis")).json());
  });
</script>
</body>
</html>
"""
