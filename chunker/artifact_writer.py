"""Text artifacts written next to the chunk output: metadata, playlists, player."""

import html
import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from string import Template
from typing import Optional, Union

from chunker.data_models import ProbeResult


TOOL_NAME = "IELTS2GO Video Chunker"
TOOL_VERSION = "2.1.0"

METADATA_FILENAME = "ielts2go_metadata.json"
PLAYER_FILENAME = "player.html"
PLAYBACK_FILENAME = "PLAYBACK.md"

# Single rendition: bandwidth is a fixed advertised value, not measured
MASTER_BANDWIDTH = 2800000
DEFAULT_RESOLUTION = "1280x720"


def master_playlist_content(prefix: str, resolution: Optional[str]) -> str:
    """
    Render the master playlist pointing at the single HLS variant.

    Args:
        prefix: Output filename prefix (variant lives at hls/{prefix}.m3u8)
        resolution: "WxH" of the source; "Unknown" or empty uses 1280x720

    Returns:
        Playlist text ending with a newline
    """
    if not resolution or resolution == "Unknown":
        resolution = DEFAULT_RESOLUTION
    return (
        "#EXTM3U\n"
        "#EXT-X-VERSION:3\n"
        f"#EXT-X-STREAM-INF:BANDWIDTH={MASTER_BANDWIDTH},RESOLUTION={resolution}\n"
        f"hls/{prefix}.m3u8\n"
    )


PLAYER_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>IELTS2GO HLS Player</title>
  <style>
    body {
      font-family: Arial, sans-serif;
      max-width: 900px;
      margin: 0 auto;
      padding: 20px;
      background-color: #f5f5f5;
      color: #333;
    }
    h1 {
      color: #2c3e50;
      text-align: center;
    }
    .player-container {
      width: 100%;
      background: #fff;
      border-radius: 8px;
      overflow: hidden;
      box-shadow: 0 4px 12px rgba(0,0,0,0.1);
      margin: 20px 0;
    }
    video {
      width: 100%;
      display: block;
    }
    .info {
      padding: 15px;
      background: #ecf0f1;
    }
    .info p {
      margin: 5px 0;
    }
    .footer {
      text-align: center;
      margin-top: 30px;
      font-size: 14px;
      color: #7f8c8d;
    }
  </style>
  <script src="https://cdn.jsdelivr.net/npm/hls.js@latest"></script>
</head>
<body>
  <h1>IELTS2GO HLS Player</h1>

  <div class="player-container">
    <video id="video" controls></video>
    <div class="info">
      <p><strong>Source:</strong> $source_name</p>
      <p><strong>Resolution:</strong> $resolution</p>
      <p><strong>Duration:</strong> $duration_seconds seconds ($duration_minutes minutes)</p>
    </div>
  </div>

  <script>
    document.addEventListener('DOMContentLoaded', function() {
      const video = document.getElementById('video');
      const videoSrc = '$playlist';

      if (window.Hls && Hls.isSupported()) {
        const hls = new Hls();
        hls.loadSource(videoSrc);
        hls.attachMedia(video);
        hls.on(Hls.Events.MANIFEST_PARSED, function() {
          video.play();
        });
      } else if (video.canPlayType('application/vnd.apple.mpegurl')) {
        video.src = videoSrc;
        video.addEventListener('loadedmetadata', function() {
          video.play();
        });
      } else {
        console.error('HLS is not supported in this browser');
      }
    });
  </script>

  <div class="footer">
    <p>Created with $tool_name</p>
  </div>
</body>
</html>
""")


PLAYBACK_TEMPLATE = Template("""# Playing the HLS stream

This folder was generated by $tool_name from `$source_name`.

## Files

- `$master` - master playlist (open this one)
- `hls/$variant` - variant playlist listing the segments
- `hls/*.ts` - media segments
- `$player` - browser player page

## In a browser

Browsers block playlist requests from `file://` pages, so serve the folder
over HTTP first:

```
python -m http.server 8000
```

Then open <http://localhost:8000/$player>.

## With a desktop player

```
ffplay $master
vlc $master
```

## Hosting

Upload the whole folder, keeping the `hls/` subfolder next to `$master`.
Serve `.m3u8` files as `application/vnd.apple.mpegurl` and `.ts` files as
`video/mp2t`.
""")


class ArtifactWriter:
    """Writes the metadata file and the HLS companion files."""

    def __init__(self, output_dir: Union[str, Path], prefix: str, source_file: Union[str, Path]):
        """
        Initialize ArtifactWriter.

        Args:
            output_dir: Run output directory
            prefix: Output filename prefix
            source_file: Path of the source video
        """
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.source_file = Path(source_file)

    @property
    def master_playlist_path(self) -> Path:
        return self.output_dir / f"{self.prefix}_master.m3u8"

    @property
    def player_path(self) -> Path:
        return self.output_dir / PLAYER_FILENAME

    @property
    def playback_readme_path(self) -> Path:
        return self.output_dir / PLAYBACK_FILENAME

    def write_metadata(self, chunk_length: float, quality_preset: str) -> Path:
        """
        Write ielts2go_metadata.json describing this run.

        Args:
            chunk_length: Chunk length in seconds
            quality_preset: Effective quality preset

        Returns:
            Path to the metadata file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        metadata_path = self.output_dir / METADATA_FILENAME
        metadata = {
            "tool": TOOL_NAME,
            "version": TOOL_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "sourceFile": self.source_file.name,
            "chunkLength": chunk_length,
            "qualityPreset": quality_preset,
            "outputDirectory": str(self.output_dir),
        }
        with open(metadata_path, 'w', encoding='utf-8') as f:
            json.dump(metadata, f, indent=2)
        logging.info(f"Metadata saved to: {metadata_path}")
        return metadata_path

    def write_master_playlist(self, resolution: Optional[str]) -> Path:
        """Write {prefix}_master.m3u8 and return its path."""
        path = self.master_playlist_path
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(master_playlist_content(self.prefix, resolution))
        logging.info(f"Master playlist created: {path}")
        return path

    def write_player(self, master_playlist_path: Path, probe_result: Optional[ProbeResult] = None) -> Path:
        """
        Write player.html referencing the master playlist by relative filename.

        Args:
            master_playlist_path: Path to the master playlist
            probe_result: Source media information shown on the page

        Returns:
            Path to the player page
        """
        duration = probe_result.duration if probe_result else 0.0
        content = PLAYER_TEMPLATE.substitute(
            source_name=html.escape(self.source_file.name),
            resolution=html.escape(probe_result.resolution if probe_result else "Unknown"),
            duration_seconds=math.floor(duration),
            duration_minutes=f"{duration / 60:.1f}",
            playlist=master_playlist_path.name.replace("'", "\\'"),
            tool_name=TOOL_NAME,
        )
        path = self.player_path
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        logging.info(f"HTML player created: {path}")
        logging.info("Open this file in a web browser to play the HLS stream")
        return path

    def write_playback_readme(self, master_playlist_path: Path) -> Path:
        """Write PLAYBACK.md with playback and hosting instructions."""
        content = PLAYBACK_TEMPLATE.substitute(
            tool_name=TOOL_NAME,
            source_name=self.source_file.name,
            master=master_playlist_path.name,
            variant=f"{self.prefix}.m3u8",
            player=PLAYER_FILENAME,
        )
        path = self.playback_readme_path
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        logging.info(f"Playback instructions written: {path}")
        return path

    def write_hls_artifacts(self, probe_result: Optional[ProbeResult] = None) -> Path:
        """
        Write master playlist, player page and PLAYBACK.md.

        Args:
            probe_result: Source media information (resolution, duration)

        Returns:
            Path to the master playlist
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        master_path = self.write_master_playlist(probe_result.resolution if probe_result else None)
        self.write_player(master_path, probe_result)
        self.write_playback_readme(master_path)
        return master_path
