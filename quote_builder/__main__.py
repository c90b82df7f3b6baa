from quote_builder.gui import main

main()
