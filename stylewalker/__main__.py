from stylewalker.cli import main


raise SystemExit(main())
