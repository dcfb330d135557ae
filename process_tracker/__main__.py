from process_tracker.app import main

raise SystemExit(main())
