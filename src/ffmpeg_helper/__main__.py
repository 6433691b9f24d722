from ffmpeg_helper.cli import main

raise SystemExit(main())
