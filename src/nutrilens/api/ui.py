"""Bundled single-page UI served at the app root."""

INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>NutriLens</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; max-width: 960px; }
      h1 { margin-bottom: 0.5rem; }
      section { border: 1px solid #ddd; border-radius: 8px; padding: 1rem; margin-bottom: 1.5rem; }
      .row { margin-bottom: 0.75rem; }
      input, select, textarea { padding: 0.4rem 0.6rem; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      button:disabled { opacity: 0.5; }
      img#preview { max-width: 320px; display: block; margin: 0.5rem 0; }
      video { max-width: 100%; }
      .notice { padding: 0.6rem; border-radius: 6px; margin: 0.5rem 0; }
      .notice.error { background: #fde8e8; color: #8a1c1c; }
      .notice.info { background: #e8f4fd; color: #1c4b8a; }
      .unsuitable { color: #8a1c1c; }
      .suitable { color: #1c6b2a; }
      dialog { width: min(640px, 90vw); }
      pre { white-space: pre-wrap; }
    </style>
  </head>
  <body>
    <h1>NutriLens</h1>
    <div id="notice"></div>

    <section>
      <h2>Analyze a food photo</h2>
      <div class="row">
        <input id="file" type="file" accept="image/*" />
        <button id="open-camera">Take photo</button>
        <button id="analyze">Analyze</button>
      </div>
      <img id="preview" alt="" hidden />
      <div id="analysis"></div>
    </section>

    <dialog id="camera-dialog">
      <video id="video" autoplay playsinline muted></video>
      <canvas id="canvas" hidden></canvas>
      <div class="row">
        <button id="snap">Capture</button>
        <button id="close-camera">Close</button>
      </div>
    </dialog>

    <section>
      <h2>Build a meal</h2>
      <div class="row">
        <select id="food"></select>
        <input id="quantity" type="number" value="100" min="1" /> g
        <button id="add-food">Add</button>
        <button id="clear-meal">Clear</button>
      </div>
      <ul id="meal"></ul>
      <p id="totals"></p>
      <div class="row">
        <label>Profile</label>
        <select id="profile"></select>
        <button id="recommend">Get recommendations</button>
      </div>
      <div id="recommendations"></div>
    </section>

    <section>
      <h2>Dietary profiles</h2>
      <ul id="profiles"></ul>
      <form id="profile-form">
        <input type="hidden" id="profile-id" />
        <div class="row"><input id="profile-name" placeholder="Profile name" /></div>
        <div class="row"><textarea id="profile-needs" placeholder="e.g., Low-carb, vegan, high-protein"></textarea></div>
        <div class="row"><textarea id="profile-allergies" placeholder="e.g., Peanuts, gluten, dairy"></textarea></div>
        <div class="row"><textarea id="profile-preferences" placeholder="e.g., Avoid processed foods"></textarea></div>
        <button type="submit">Save profile</button>
        <button type="button" id="new-profile">New</button>
      </form>
    </section>

    <script>
      let image = null;
      let stream = null;
      const $ = (id) => document.getElementById(id);

      function notify(message, kind) {
        const el = document.createElement('div');
        el.className = 'notice ' + (kind || 'info');
        el.textContent = message;
        el.onclick = () => el.remove();
        $('notice').appendChild(el);
        setTimeout(() => el.remove(), 6000);
      }

      async function call(method, path, body) {
        const res = await fetch(path, {
          method,
          headers: body ? { 'Content-Type': 'application/json' } : {},
          body: body ? JSON.stringify(body) : undefined,
        });
        const data = await res.json();
        if (!res.ok) {
          const error = data.error || { message: 'Request failed.' };
          throw new Error(error.message);
        }
        return data;
      }

      function escapeHtml(text) {
        const el = document.createElement('span');
        el.textContent = text == null ? '' : String(text);
        return el.innerHTML;
      }

      function renderAnalysis(analysis, mapsUrl) {
        if (!analysis) { $('analysis').innerHTML = ''; return; }
        const s = analysis.suitability;
        const nutrients = analysis.nutrients.map((n) =>
          '<li>' + escapeHtml(n.name) + ': ' + escapeHtml(n.amount) +
          ' <em>(' + escapeHtml(n.importance) + ')</em></li>').join('');
        $('analysis').innerHTML =
          '<h3>' + escapeHtml(analysis.foodName) + '</h3>' +
          (analysis.isSpoiled
            ? '<p class="unsuitable">Appears spoiled: ' + escapeHtml(analysis.spoilageReason) + '</p>'
            : '') +
          '<p class="' + (analysis.isHealthy ? 'suitable' : 'unsuitable') + '">' +
          escapeHtml(analysis.healthSummary) + '</p>' +
          '<h4>Nutrients per 10 g</h4><ul>' + nutrients + '</ul>' +
          '<h4>Suitability</h4><ul>' +
          ['diabetes', 'allergies', 'cholesterol', 'heartHealth', 'weightManagement', 'gutHealth', 'general']
            .map((key) => '<li><strong>' + key + ':</strong> ' + escapeHtml(s[key]) + '</li>').join('') +
          '</ul><h4>Availability</h4><p>' + escapeHtml(analysis.availability.description) +
          ' <a target="_blank" rel="noopener" href="' + escapeHtml(mapsUrl) + '">Find on map</a></p>';
      }

      function renderWorkspace(ws) {
        $('meal').innerHTML = ws.meal.map((item) =>
          '<li>' + escapeHtml(item.food.name) + ' - ' + item.quantity + ' g ' +
          '<button data-remove="' + escapeHtml(item.food.id) + '">Remove</button></li>').join('');
        const t = ws.totals;
        $('totals').textContent = 'Total: ' + Math.round(t.calories) + ' kcal, ' +
          Math.round(t.protein) + ' g protein, ' + Math.round(t.carbs) + ' g carbs, ' +
          Math.round(t.fat) + ' g fat';
        $('profile').value = ws.selectedProfileId;
        $('recommend').disabled = ws.isRecommending;
        $('analyze').disabled = ws.isAnalyzing;
        renderRecommendations(ws.recommendations);
      }

      function renderRecommendations(recs) {
        if (!recs) { $('recommendations').innerHTML = ''; return; }
        $('recommendations').innerHTML = recs.map((r) =>
          '<div class="' + (r.isSuitable ? 'suitable' : 'unsuitable') + '"><strong>' +
          escapeHtml(r.foodItemName) + '</strong>' +
          (r.reason ? '<p>' + escapeHtml(r.reason) + '</p>' : '') +
          '<pre>' + escapeHtml(r.recommendation) + '</pre></div>').join('');
      }

      async function loadProfiles() {
        const { profiles } = await call('GET', '/api/profiles');
        $('profile').innerHTML = profiles.map((p) =>
          '<option value="' + escapeHtml(p.id) + '">' + escapeHtml(p.name) + '</option>').join('');
        $('profiles').innerHTML = profiles.map((p) =>
          '<li>' + escapeHtml(p.name) + ' <button data-edit="' + escapeHtml(p.id) + '">Edit</button>' +
          '<button data-delete="' + escapeHtml(p.id) + '">Delete</button></li>').join('');
        window.profiles = profiles;
      }

      async function refresh() {
        renderWorkspace(await call('GET', '/api/workspace'));
      }

      async function init() {
        const { foods } = await call('GET', '/api/foods');
        $('food').innerHTML = foods.map((f) =>
          '<option value="' + escapeHtml(f.id) + '">' + escapeHtml(f.name) + '</option>').join('');
        await loadProfiles();
        await refresh();
      }

      $('file').onchange = (event) => {
        const file = event.target.files[0];
        if (!file) return;
        const reader = new FileReader();
        reader.onloadend = () => { setImage(reader.result); };
        reader.readAsDataURL(file);
      };

      function setImage(dataUri) {
        image = dataUri;
        $('preview').src = dataUri;
        $('preview').hidden = false;
        renderAnalysis(null);
      }

      function stopCamera() {
        if (stream) {
          stream.getTracks().forEach((track) => track.stop());
          stream = null;
        }
      }

      $('open-camera').onclick = async () => {
        $('camera-dialog').showModal();
        if (!navigator.mediaDevices || !navigator.mediaDevices.getUserMedia) {
          notify('Your browser does not support camera access.', 'error');
          return;
        }
        try {
          const opened = await navigator.mediaDevices.getUserMedia({ video: { facingMode: 'environment' } });
          if (!$('camera-dialog').open) {
            opened.getTracks().forEach((track) => track.stop());
            return;
          }
          stream = opened;
          $('video').srcObject = stream;
        } catch (error) {
          notify('Please enable camera permissions in your browser settings to use this feature.', 'error');
        }
      };

      $('camera-dialog').addEventListener('close', stopCamera);
      $('close-camera').onclick = () => $('camera-dialog').close();

      $('snap').onclick = () => {
        const video = $('video');
        const canvas = $('canvas');
        canvas.width = video.videoWidth;
        canvas.height = video.videoHeight;
        const context = canvas.getContext('2d');
        if (!context || !video.videoWidth) {
          notify('Could not capture an image.', 'error');
          return;
        }
        context.drawImage(video, 0, 0, canvas.width, canvas.height);
        setImage(canvas.toDataURL('image/jpeg'));
        $('camera-dialog').close();
      };

      $('analyze').onclick = async () => {
        if (!image) {
          notify('Please upload or take an image to analyze.', 'error');
          return;
        }
        $('analyze').disabled = true;
        renderAnalysis(null);
        try {
          const { analysis, mapsUrl } = await call('POST', '/api/analysis', { photoDataUri: image });
          renderAnalysis(analysis, mapsUrl);
        } catch (error) {
          notify(error.message, 'error');
        } finally {
          $('analyze').disabled = false;
        }
      };

      $('add-food').onclick = async () => {
        try {
          renderWorkspace(await call('POST', '/api/meal/items', {
            foodId: $('food').value, quantity: $('quantity').value,
          }));
        } catch (error) {
          notify(error.message, 'error');
        }
      };

      $('clear-meal').onclick = async () => renderWorkspace(await call('DELETE', '/api/meal'));

      $('meal').onclick = async (event) => {
        const foodId = event.target.dataset.remove;
        if (foodId) renderWorkspace(await call('DELETE', '/api/meal/items/' + encodeURIComponent(foodId)));
      };

      $('profile').onchange = async () => {
        try {
          renderWorkspace(await call('PUT', '/api/workspace/profile', { profileId: $('profile').value }));
        } catch (error) {
          notify(error.message, 'error');
        }
      };

      $('recommend').onclick = async () => {
        $('recommend').disabled = true;
        renderRecommendations(null);
        try {
          const { recommendations } = await call('POST', '/api/recommendations');
          renderRecommendations(recommendations);
        } catch (error) {
          notify(error.message, 'error');
        } finally {
          $('recommend').disabled = false;
        }
      };

      $('profiles').onclick = async (event) => {
        const { edit, delete: remove } = event.target.dataset;
        if (edit) {
          const p = window.profiles.find((item) => item.id === edit);
          $('profile-id').value = p.id;
          $('profile-name').value = p.name;
          $('profile-needs').value = p.dietaryNeeds || '';
          $('profile-allergies').value = p.allergies || '';
          $('profile-preferences').value = p.preferences || '';
        }
        if (remove) {
          try {
            await call('DELETE', '/api/profiles/' + encodeURIComponent(remove));
            notify('Profile deleted.');
            await loadProfiles();
            await refresh();
          } catch (error) {
            notify(error.message, 'error');
          }
        }
      };

      $('new-profile').onclick = () => $('profile-form').reset();

      $('profile-form').onsubmit = async (event) => {
        event.preventDefault();
        try {
          const { profile } = await call('POST', '/api/profiles', {
            id: $('profile-id').value || null,
            name: $('profile-name').value,
            dietaryNeeds: $('profile-needs').value,
            allergies: $('profile-allergies').value,
            preferences: $('profile-preferences').value,
          });
          notify('Profile "' + profile.name + '" saved.');
          $('profile-form').reset();
          await loadProfiles();
          await refresh();
        } catch (error) {
          notify(error.message, 'error');
        }
      };

      init().catch((error) => notify(error.message, 'error'));
    </script>
  </body>
</html>
"""
