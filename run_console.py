"""
Launcher script for the YouTube Video Analyzer console client.
"""

from video_analyzer.frontend.console import main


if __name__ == "__main__":
    main()
